"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional

from domain.value_objects import ReservationDateChange, ReservationDraft


class ServiceResult(NamedTuple):
    """Payload of a successful call plus the session token it carried, if any"""
    data: Any
    session: Optional[str] = None


class HotelRepository(ABC):
    """Repository interface for hotel and room type availability"""

    @abstractmethod
    async def find_all(self) -> ServiceResult:
        """List hotels -> ServiceResult[List[Hotel]]"""
        pass

    @abstractmethod
    async def search_available(self, city: str, start_date: str, end_date: str) -> ServiceResult:
        """Hotels in a city with free inventory -> ServiceResult[List[Hotel]]"""
        pass

    @abstractmethod
    async def find_room_type_availability(
        self, hotel_id: int, check_in: str, check_out: str, num_guests: int
    ) -> ServiceResult:
        """Room types of a hotel for a stay -> ServiceResult[List[RoomType]]"""
        pass


class ReservationRepository(ABC):
    """Repository interface for the signed-in user's reservations"""

    @abstractmethod
    async def find_all(self) -> ServiceResult:
        """Find all reservations -> ServiceResult[List[Reservation]]"""
        pass

    @abstractmethod
    async def create(self, draft: ReservationDraft) -> ServiceResult:
        """Create reservation -> ServiceResult[Reservation]"""
        pass

    @abstractmethod
    async def update_dates(self, reservation_id: int, change: ReservationDateChange) -> ServiceResult:
        """Move a reservation's stay -> ServiceResult[Reservation]"""
        pass

    @abstractmethod
    async def cancel(self, reservation_id: int) -> ServiceResult:
        """Cancel reservation"""
        pass


class SessionRepository(ABC):
    """Repository interface for the client's authenticated session"""

    @abstractmethod
    def has_session_indicator(self) -> bool:
        """Whether a client-readable session indicator is present"""
        pass

    @abstractmethod
    def store_token(self, token: str) -> None:
        """Persist a session token client-side"""
        pass

    @abstractmethod
    def clear_token(self) -> None:
        pass

    @abstractmethod
    async def probe(self) -> ServiceResult:
        """One read-only call to an authenticated endpoint"""
        pass

    @abstractmethod
    async def logout(self) -> ServiceResult:
        pass

    @abstractmethod
    def authorization_url(self) -> str:
        """Identity provider entry point for a browser redirect"""
        pass
