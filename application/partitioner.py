"""Reservation Partitioner - upcoming / past / canceled views"""
from datetime import date
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from domain.entities import Reservation
from domain.temporal import parse_local_date, today_local


class ReservationPartition(BaseModel):
    model_config = ConfigDict(frozen=True)

    upcoming: Tuple[Reservation, ...] = ()
    past: Tuple[Reservation, ...] = ()
    canceled: Tuple[Reservation, ...] = ()


def _check_in_key(reservation: Reservation) -> Tuple[bool, date]:
    parsed = parse_local_date(reservation.check_in_date)
    return (parsed is None, parsed or date.max)


def partition_reservations(reservations: Iterable[Reservation],
                           today: Optional[date] = None) -> ReservationPartition:
    """
    Split reservations into three disjoint buckets, each ordered by check-in.

    CANCELED wins over dates. A stay whose check-out is before today is past;
    everything else, including a stay in progress, is upcoming. Call this on
    every render; the result is not meant to be kept.
    """
    today = today or today_local()
    upcoming: List[Reservation] = []
    past: List[Reservation] = []
    canceled: List[Reservation] = []

    for reservation in sorted(reservations, key=_check_in_key):
        if reservation.is_canceled:
            canceled.append(reservation)
            continue
        check_out = parse_local_date(reservation.check_out_date)
        if check_out is not None and check_out < today:
            past.append(reservation)
        else:
            upcoming.append(reservation)

    return ReservationPartition(upcoming=tuple(upcoming), past=tuple(past), canceled=tuple(canceled))
