"""Application Services - search, room type selection and reservation lifecycle"""
import logging
import math
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, List, Optional

from pydantic import BaseModel

from domain.entities import Hotel, Reservation, RoomType
from domain.enums import MutationState
from domain.errors import ApiError, BookingValidationError
from domain.repositories import HotelRepository, ReservationRepository, ServiceResult
from domain.temporal import nights_between, today_local
from domain.value_objects import DateRange, Money, ReservationDateChange, ReservationDraft
from application.notifications import NotificationQueue
from application.session import SessionGate

logger = logging.getLogger(__name__)

Clock = Callable[[], date]

DEFAULT_PAGE_SIZE = 4
MISSING_CITY_MESSAGE = "Please enter a destination city."
HOTELS_FAILED_MESSAGE = "Unable to load hotels. Please try again."
ROOM_TYPES_FAILED_MESSAGE = "Failed to load room types."
GUESTS_MESSAGE = "Guests must be at least 1"


def filter_hotels(hotels: Iterable[Hotel], fragment: str) -> List[Hotel]:
    """Local filter on "{city} {name}"; never goes to the network"""
    hotels = list(hotels)
    needle = (fragment or "").strip().lower()
    if not needle:
        return hotels
    return [h for h in hotels if needle in h.search_text]


def rank_room_types(room_types: Iterable[RoomType]) -> List[RoomType]:
    """Cheapest first; a missing rate counts as unbounded and sorts last"""
    return sorted(
        room_types,
        key=lambda rt: (rt.base_rate is None, rt.base_rate if rt.base_rate is not None else 0),
    )


def compute_price_total(base_rate: Any, nights: int) -> Decimal:
    """base_rate x nights, floored at zero. Anything non-numeric prices at zero."""
    try:
        rate = Decimal(str(base_rate))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)
    if not rate.is_finite():
        return Decimal(0)
    return max(Decimal(0), rate * nights)


def build_date_range(check_in: str, check_out: str) -> DateRange:
    return DateRange().with_check_in(check_in).with_check_out(check_out)


class MutationInteraction(BaseModel):
    """
    Submit state of one modal. IDLE -> SUBMITTING -> SUCCESS, or back to
    IDLE with ``error`` set when the call fails so the user can retry.
    """
    state: MutationState = MutationState.IDLE
    error: str = ""

    @property
    def submitting(self) -> bool:
        return self.state == MutationState.SUBMITTING

    def begin(self) -> None:
        self.state = MutationState.SUBMITTING
        self.error = ""

    def succeed(self) -> None:
        self.state = MutationState.SUCCESS
        self.error = ""

    def fail(self, message: str) -> None:
        self.state = MutationState.IDLE
        self.error = message

    def reject(self, message: str) -> None:
        """Validation problem found before any request was made"""
        self.state = MutationState.IDLE
        self.error = message


class AvailabilitySearchService:
    """Hotel search for a city and stay"""

    def __init__(self, repository: HotelRepository, session: SessionGate, clock: Clock = today_local):
        self.repository = repository
        self.session = session
        self.clock = clock
        self.hotels: List[Hotel] = []
        self.has_fetched = False
        self.loading = False
        self.error = ""

    async def search(self, city: str, date_range: DateRange) -> List[Hotel]:
        if not self.session.require_session():
            return self.hotels
        city = (city or "").strip()
        if not city:
            self.error = MISSING_CITY_MESSAGE
            return self.hotels
        try:
            date_range.validated(today=self.clock())
        except BookingValidationError as e:
            self.error = e.message
            return self.hotels
        return await self._load(
            self.repository.search_available(city, date_range.check_in, date_range.check_out)
        )

    async def list_all(self) -> List[Hotel]:
        if not self.session.require_session():
            return self.hotels
        return await self._load(self.repository.find_all())

    async def _load(self, call) -> List[Hotel]:
        self.loading = True
        self.error = ""
        try:
            result = await call
        except ApiError as e:
            # Keep the previous results on screen; only the banner changes
            self.error = e.message or HOTELS_FAILED_MESSAGE
        else:
            self.hotels = list(result.data)
            self.has_fetched = True
            self.session.confirm_token(result.session)
            logger.info("Loaded %d hotels", len(self.hotels))
        finally:
            self.loading = False
        return self.hotels

    def filter(self, fragment: str) -> List[Hotel]:
        return filter_hotels(self.hotels, fragment)

    def clear(self) -> None:
        self.hotels = []
        self.has_fetched = False
        self.error = ""


class RoomTypeSelector:
    """Ranked, paginated room types for the hotel in the room-type modal"""

    def __init__(self, repository: HotelRepository, session: SessionGate,
                 clock: Clock = today_local, page_size: int = DEFAULT_PAGE_SIZE):
        self.repository = repository
        self.session = session
        self.clock = clock
        self.page_size = page_size
        self.reset()

    def reset(self, hotel: Optional[Hotel] = None, date_range: Optional[DateRange] = None) -> None:
        self.hotel = hotel
        self.date_range = date_range or DateRange()
        self.num_guests = 1
        self.room_types: List[RoomType] = []
        self.selected_room_type_id: Optional[int] = None
        self.page = 1
        self.loading = False
        self.error = ""

    async def load(self, hotel: Hotel, date_range: DateRange, num_guests: int = 1) -> List[RoomType]:
        self.hotel = hotel
        self.date_range = date_range
        self.num_guests = num_guests
        if not self.session.require_session():
            return self.room_types
        if num_guests < 1:
            self.error = GUESTS_MESSAGE
            return self.room_types
        try:
            date_range.validated(today=self.clock())
        except BookingValidationError as e:
            self.error = e.message
            return self.room_types

        self.loading = True
        self.error = ""
        try:
            result = await self.repository.find_room_type_availability(
                hotel.id, date_range.check_in, date_range.check_out, num_guests
            )
        except ApiError as e:
            self.error = e.message or ROOM_TYPES_FAILED_MESSAGE
        else:
            self.room_types = rank_room_types(result.data)
            self.selected_room_type_id = self.room_types[0].room_type_id if self.room_types else None
            self.page = 1
            self.session.confirm_token(result.session)
        finally:
            self.loading = False
        return self.room_types

    async def reload(self, num_guests: int) -> List[RoomType]:
        if self.hotel is None:
            return self.room_types
        return await self.load(self.hotel, self.date_range, num_guests)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.room_types) / self.page_size))

    @property
    def current_page_items(self) -> List[RoomType]:
        start = (self.page - 1) * self.page_size
        return self.room_types[start:start + self.page_size]

    def next_page(self) -> int:
        self.page = min(self.total_pages, self.page + 1)
        return self.page

    def prev_page(self) -> int:
        self.page = max(1, self.page - 1)
        return self.page

    def select(self, room_type_id: int) -> bool:
        if any(rt.room_type_id == room_type_id for rt in self.room_types):
            self.selected_room_type_id = room_type_id
            return True
        return False

    @property
    def selected_room_type(self) -> Optional[RoomType]:
        for rt in self.room_types:
            if rt.room_type_id == self.selected_room_type_id:
                return rt
        return None

    async def submit(self, lifecycle: "ReservationLifecycleService",
                     interaction: MutationInteraction, notes: str = "") -> Optional[ServiceResult]:
        selected = self.selected_room_type
        if selected is None or interaction.submitting:
            return None
        return await lifecycle.create(
            interaction,
            hotel=self.hotel,
            room_type=selected,
            check_in=self.date_range.check_in,
            check_out=self.date_range.check_out,
            num_guests=self.num_guests,
            base_rate=selected.base_rate if selected.base_rate is not None else 0,
            notes=notes,
        )


class ReservationLifecycleService:
    """
    Create, modify and cancel reservations against the service.

    Nothing here patches ``reservations`` after a mutation. The caller
    refetches the whole list, so what the user sees is always what the
    server last said.
    """

    def __init__(self, repository: ReservationRepository, session: SessionGate,
                 notifications: NotificationQueue, clock: Clock = today_local,
                 currency: str = "USD"):
        self.repository = repository
        self.session = session
        self.notifications = notifications
        self.clock = clock
        self.currency = currency
        self.reservations: List[Reservation] = []
        self.has_loaded = False
        self.loading = False
        self.error = ""

    async def fetch_all(self) -> List[Reservation]:
        if not self.session.require_session():
            return self.reservations
        self.loading = True
        self.error = ""
        try:
            result = await self.repository.find_all()
        except ApiError as e:
            self.error = e.message or "Unable to load reservations."
        else:
            self.reservations = list(result.data)
            self.has_loaded = True
            self.session.confirm_token(result.session)
        finally:
            self.loading = False
        return self.reservations

    async def create(
        self,
        interaction: MutationInteraction,
        hotel: Optional[Hotel],
        room_type: Optional[RoomType],
        check_in: str,
        check_out: str,
        num_guests: int = 1,
        base_rate: Any = 0,
        notes: str = "",
    ) -> Optional[ServiceResult]:
        """Create new reservation; price is base_rate x nights"""
        if interaction.submitting or not self.session.require_session():
            return None
        if hotel is None or room_type is None:
            interaction.reject("Please choose a hotel and room type.")
            return None
        try:
            date_range = build_date_range(check_in, check_out).validated(today=self.clock())
        except BookingValidationError as e:
            interaction.reject(e.message)
            return None
        if num_guests < 1:
            interaction.reject(GUESTS_MESSAGE)
            return None

        nights = nights_between(date_range.check_in, date_range.check_out)
        total = Money(amount=compute_price_total(base_rate, nights), currency=self.currency)
        draft = ReservationDraft(
            hotel_id=hotel.id,
            room_type_id=room_type.room_type_id,
            check_in_date=date_range.check_in,
            check_out_date=date_range.check_out,
            nights=nights,
            num_guests=num_guests,
            currency=total.currency,
            price_total=float(total.amount),
            notes=notes,
        )
        return await self._mutate(
            interaction, self.repository.create(draft),
            "Reservation created", "Failed to create reservation.",
        )

    async def modify(self, interaction: MutationInteraction, reservation_id: int,
                     check_in: str, check_out: str) -> Optional[ServiceResult]:
        """Move a reservation to new dates; nights are recomputed, never reused"""
        if interaction.submitting or not self.session.require_session():
            return None
        try:
            date_range = build_date_range(check_in, check_out).validated(
                today=self.clock(), allow_today=True
            )
        except BookingValidationError as e:
            interaction.reject(e.message)
            return None
        change = ReservationDateChange(
            check_in_date=date_range.check_in,
            check_out_date=date_range.check_out,
            nights=nights_between(date_range.check_in, date_range.check_out),
        )
        return await self._mutate(
            interaction, self.repository.update_dates(reservation_id, change),
            "Reservation updated", "Failed to update reservation.",
        )

    async def cancel(self, interaction: MutationInteraction, reservation_id: int) -> Optional[ServiceResult]:
        if interaction.submitting or not self.session.require_session():
            return None
        return await self._mutate(
            interaction, self.repository.cancel(reservation_id),
            "Reservation canceled", "Failed to cancel reservation.",
        )

    async def _mutate(self, interaction: MutationInteraction, call,
                      success_message: str, failure_message: str) -> Optional[ServiceResult]:
        interaction.begin()
        try:
            result = await call
        except ApiError as e:
            message = e.message or failure_message
            logger.warning("%s %s", failure_message, message)
            interaction.fail(message)
            self.notifications.error(message)
            return None
        finally:
            if interaction.submitting:
                interaction.state = MutationState.IDLE
        interaction.succeed()
        self.session.confirm_token(result.session)
        self.session.confirm_from_payload(result.data)
        self.notifications.success(success_message)
        return result

    def clear(self) -> None:
        self.reservations = []
        self.has_loaded = False
        self.error = ""
