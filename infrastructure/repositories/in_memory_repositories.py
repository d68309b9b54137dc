"""In-Memory Repository Implementations

Stand-ins for the AirHotel service that keep everything in process. Every
call is appended to ``calls`` so callers can tell whether the "network" was
touched at all.
"""
from typing import Dict, List, Optional

from domain.entities import Hotel, Reservation, RoomType
from domain.enums import ReservationStatus
from domain.errors import ApiError
from domain.repositories import HotelRepository, ReservationRepository, ServiceResult, SessionRepository
from domain.value_objects import ReservationDateChange, ReservationDraft


class InMemoryHotelRepository(HotelRepository):
    """In-memory implementation of HotelRepository"""

    def __init__(self, hotels: Optional[List[Hotel]] = None,
                 room_types: Optional[Dict[int, List[RoomType]]] = None):
        self._hotels: Dict[int, Hotel] = {h.id: h for h in hotels or []}
        self._room_types: Dict[int, List[RoomType]] = dict(room_types or {})
        self.calls: List[str] = []

    async def find_all(self) -> ServiceResult:
        self.calls.append("find_all")
        return ServiceResult(list(self._hotels.values()))

    async def search_available(self, city: str, start_date: str, end_date: str) -> ServiceResult:
        self.calls.append("search_available")
        wanted = city.strip().lower()
        return ServiceResult([h for h in self._hotels.values() if (h.city or "").lower() == wanted])

    async def find_room_type_availability(
        self, hotel_id: int, check_in: str, check_out: str, num_guests: int
    ) -> ServiceResult:
        self.calls.append("find_room_type_availability")
        if hotel_id not in self._hotels:
            raise ApiError("Hotel not found", status_code=404)
        return ServiceResult([
            rt for rt in self._room_types.get(hotel_id, [])
            if rt.capacity is None or rt.capacity >= num_guests
        ])

    def hotel_name(self, hotel_id: int) -> Optional[str]:
        hotel = self._hotels.get(hotel_id)
        return hotel.name if hotel else None

    def room_type_name(self, hotel_id: int, room_type_id: int) -> Optional[str]:
        for rt in self._room_types.get(hotel_id, []):
            if rt.room_type_id == room_type_id:
                return rt.name
        return None


class InMemoryReservationRepository(ReservationRepository):
    """In-memory implementation of ReservationRepository"""

    def __init__(self, reservations: Optional[List[Reservation]] = None,
                 hotels: Optional[InMemoryHotelRepository] = None):
        self._storage: Dict[int, Reservation] = {r.id: r for r in reservations or []}
        self._hotels = hotels
        self._next_id = max(self._storage, default=0) + 1
        self.calls: List[str] = []

    async def find_all(self) -> ServiceResult:
        self.calls.append("find_all")
        return ServiceResult(list(self._storage.values()))

    async def create(self, draft: ReservationDraft) -> ServiceResult:
        self.calls.append("create")
        reservation = Reservation(
            id=self._next_id,
            hotel_id=draft.hotel_id,
            hotel_name=self._hotels.hotel_name(draft.hotel_id) if self._hotels else None,
            room_type_id=draft.room_type_id,
            room_type_name=(
                self._hotels.room_type_name(draft.hotel_id, draft.room_type_id) if self._hotels else None
            ),
            check_in_date=draft.check_in_date,
            check_out_date=draft.check_out_date,
            nights=draft.nights,
            num_guests=draft.num_guests,
            currency=draft.currency,
            price_total=draft.price_total,
            status=ReservationStatus.PENDING.value,
            notes=draft.notes,
        )
        self._storage[reservation.id] = reservation
        self._next_id += 1
        return ServiceResult(reservation)

    async def update_dates(self, reservation_id: int, change: ReservationDateChange) -> ServiceResult:
        self.calls.append("update_dates")
        reservation = self._get(reservation_id)
        updated = reservation.model_copy(update={
            "check_in_date": change.check_in_date,
            "check_out_date": change.check_out_date,
            "nights": change.nights,
        })
        self._storage[reservation_id] = updated
        return ServiceResult(updated)

    async def cancel(self, reservation_id: int) -> ServiceResult:
        self.calls.append("cancel")
        reservation = self._get(reservation_id)
        self._storage[reservation_id] = reservation.model_copy(
            update={"status": ReservationStatus.CANCELED.value}
        )
        return ServiceResult({"message": "Reservation canceled"})

    def _get(self, reservation_id: int) -> Reservation:
        if reservation_id not in self._storage:
            raise ApiError("Reservation not found", status_code=404)
        return self._storage[reservation_id]


class InMemorySessionRepository(SessionRepository):
    """In-memory implementation of SessionRepository"""

    def __init__(self, token: Optional[str] = None, authenticated: bool = False,
                 login_url: str = "http://localhost:8080/oauth2/authorization/google"):
        self.token = token
        # Whether the "server" would accept the probe without a readable token
        self.authenticated = authenticated or token is not None
        self.login_url = login_url
        self.calls: List[str] = []

    def has_session_indicator(self) -> bool:
        return self.token is not None

    def store_token(self, token: str) -> None:
        self.token = token
        self.authenticated = True

    def clear_token(self) -> None:
        self.token = None

    async def probe(self) -> ServiceResult:
        self.calls.append("probe")
        if not self.authenticated:
            raise ApiError("Unauthorized", status_code=401)
        return ServiceResult([])

    async def logout(self) -> ServiceResult:
        self.calls.append("logout")
        self.authenticated = False
        return ServiceResult({"message": "Logged out successfully"})

    def authorization_url(self) -> str:
        return self.login_url
