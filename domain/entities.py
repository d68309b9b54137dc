"""Domain Entities - snapshots returned by the AirHotel service"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from decimal import Decimal
from typing import Optional

from domain.enums import ReservationStatus
from domain.temporal import nights_between


class Hotel(BaseModel):
    """Hotel as listed by a search. Replaced wholesale on every search."""
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    name: str = ""
    brand: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    star_rating: Optional[Decimal] = None

    @property
    def search_text(self) -> str:
        return f"{self.city or ''} {self.name or ''}".lower()


class RoomType(BaseModel):
    """Room type availability for one (hotel, dates, guests) query"""
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    room_type_id: int
    hotel_id: Optional[int] = None
    name: str = ""
    code: Optional[str] = None
    bed_type: Optional[str] = None
    capacity: Optional[int] = None
    base_rate: Optional[Decimal] = None
    available: Optional[int] = None
    total_rooms: Optional[int] = None


class Reservation(BaseModel):
    """Reservation as the service last reported it"""
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    hotel_id: Optional[int] = None
    hotel_name: Optional[str] = None
    room_type_id: Optional[int] = None
    room_type_name: Optional[str] = None
    check_in_date: Optional[str] = None
    check_out_date: Optional[str] = None
    nights: Optional[int] = None
    num_guests: Optional[int] = None
    currency: Optional[str] = None
    price_total: Optional[Decimal] = None
    status: Optional[str] = ReservationStatus.PENDING.value
    upgrade_status: Optional[str] = None
    room_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_canceled(self) -> bool:
        """Only CANCELED is terminal; every other status is active"""
        return (self.status or "").upper() == ReservationStatus.CANCELED.value

    @property
    def stay_nights(self) -> int:
        return nights_between(self.check_in_date, self.check_out_date)
