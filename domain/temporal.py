"""Temporal utilities for date-only values.

Dates travel through the workflow as ``YYYY-MM-DD`` strings, the way the
service emits them. They are parsed as local calendar dates so a stay never
shifts by a day when the host timezone is behind UTC.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[str, date, None]

ISO_FORMAT = "%Y-%m-%d"


def today_local() -> date:
    """Start of the current local day"""
    return date.today()


def parse_local_date(value: DateLike) -> Optional[date]:
    """Parse a date-only value; empty or invalid input gives None"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip()[:10], ISO_FORMAT).date()
    except ValueError:
        return None


def to_iso(value: Optional[date]) -> str:
    return value.strftime(ISO_FORMAT) if value else ""


def add_days(value: DateLike, days: int) -> str:
    parsed = parse_local_date(value)
    if parsed is None:
        return ""
    return to_iso(parsed + timedelta(days=days))


def nights_between(check_in: DateLike, check_out: DateLike) -> int:
    """Whole nights between two dates, never negative"""
    start = parse_local_date(check_in)
    end = parse_local_date(check_out)
    if start is None or end is None:
        return 0
    diff = (end - start).days
    return diff if diff > 0 else 0


def is_past_or_today(value: DateLike, today: Optional[date] = None) -> bool:
    parsed = parse_local_date(value)
    if parsed is None:
        return False
    return parsed <= (today or today_local())


def is_past(value: DateLike, today: Optional[date] = None) -> bool:
    parsed = parse_local_date(value)
    if parsed is None:
        return False
    return parsed < (today or today_local())
