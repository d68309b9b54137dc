"""Domain Value Objects"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4
from typing import Optional

from domain.enums import ToastSeverity
from domain.errors import BookingValidationError
from domain.temporal import (
    add_days, is_past, is_past_or_today, nights_between, parse_local_date, to_iso
)


class DateRange(BaseModel):
    """Value Object for a stay's dates while the user is still editing them.

    Either side may be empty. When both are set, check-out is after check-in.
    """
    model_config = ConfigDict(frozen=True)

    check_in: str = ""
    check_out: str = ""

    @model_validator(mode="after")
    def check_out_after_check_in(self):
        start = parse_local_date(self.check_in)
        end = parse_local_date(self.check_out)
        if start and end and end <= start:
            raise ValueError("Check-out must be after check-in")
        return self

    @property
    def is_complete(self) -> bool:
        return bool(self.check_in and self.check_out)

    @property
    def nights(self) -> int:
        return nights_between(self.check_in, self.check_out)

    def with_check_in(self, value: Optional[str]) -> "DateRange":
        """Set check-in, clearing a check-out that no longer leaves room for a stay"""
        if not value:
            return DateRange()
        parsed = parse_local_date(value)
        if parsed is None:
            raise BookingValidationError(f"Invalid check-in date: {value}")
        check_in = to_iso(parsed)
        check_out = self.check_out
        if check_out and check_out <= add_days(check_in, 1):
            check_out = ""
        return DateRange(check_in=check_in, check_out=check_out)

    def with_check_out(self, value: Optional[str]) -> "DateRange":
        if not value:
            return DateRange(check_in=self.check_in)
        parsed = parse_local_date(value)
        if parsed is None:
            raise BookingValidationError(f"Invalid check-out date: {value}")
        check_out = to_iso(parsed)
        if not self.check_in:
            raise BookingValidationError("Choose a check-in date first")
        if check_out < add_days(self.check_in, 1):
            raise BookingValidationError("Check-out must be after check-in")
        return DateRange(check_in=self.check_in, check_out=check_out)

    def validated(self, today: Optional[date] = None, allow_today: bool = False) -> "DateRange":
        """Return self when the range may be sent to the service, raise otherwise.

        New stays start tomorrow at the earliest; an existing stay may be moved
        to start today (``allow_today``).
        """
        if not self.is_complete:
            raise BookingValidationError("Please choose check-in and check-out dates.")
        too_early = is_past if allow_today else is_past_or_today
        if too_early(self.check_in, today):
            raise BookingValidationError("Check-in date cannot be in the past.")
        if self.nights <= 0:
            raise BookingValidationError("Check-out must be after check-in")
        return self


class Money(BaseModel):
    """Value Object for monetary amounts"""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(ge=0)
    currency: str = "USD"


class Toast(BaseModel):
    """Short-lived user notification"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    message: str
    severity: ToastSeverity = ToastSeverity.SUCCESS
    created_at: datetime = Field(default_factory=datetime.now)


class ReservationDraft(BaseModel):
    """Body of a create-reservation request"""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    hotel_id: int
    room_type_id: int
    check_in_date: str
    check_out_date: str
    nights: int = Field(ge=0)
    num_guests: int = Field(ge=1)
    currency: str = "USD"
    price_total: float = Field(ge=0)
    notes: str = ""


class ReservationDateChange(BaseModel):
    """Body of a modify-reservation request"""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    check_in_date: str
    check_out_date: str
    nights: int = Field(ge=0)
