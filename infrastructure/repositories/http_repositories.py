"""HTTP Repository Implementations backed by the AirHotel REST service"""
import logging
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from domain.entities import Hotel, Reservation, RoomType
from domain.errors import ApiError
from domain.repositories import HotelRepository, ReservationRepository, ServiceResult, SessionRepository
from domain.value_objects import ReservationDateChange, ReservationDraft
from infrastructure.api_client import AirHotelApiClient, extract_session, unwrap_list

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse_list(model: Type[M], items: List[Any]) -> List[M]:
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as e:
        logger.warning("Unexpected %s payload: %s", model.__name__, e)
        raise ApiError(f"Unexpected {model.__name__} data from the AirHotel service.") from e


def _parse_reservation(payload: Any):
    if isinstance(payload, dict) and "id" in payload:
        try:
            return Reservation.model_validate(payload)
        except ValidationError:
            logger.debug("Reservation body did not parse; the list refresh will show it")
    return payload


class HttpHotelRepository(HotelRepository):
    """Hotels and room types over HTTP"""

    def __init__(self, client: AirHotelApiClient):
        self.client = client

    async def find_all(self) -> ServiceResult:
        payload = await self.client.get("/hotels")
        return ServiceResult(_parse_list(Hotel, unwrap_list(payload)), extract_session(payload))

    async def search_available(self, city: str, start_date: str, end_date: str) -> ServiceResult:
        payload = await self.client.get(
            "/hotels/search/available",
            params={"city": city, "startDate": start_date, "endDate": end_date},
        )
        return ServiceResult(_parse_list(Hotel, unwrap_list(payload)), extract_session(payload))

    async def find_room_type_availability(
        self, hotel_id: int, check_in: str, check_out: str, num_guests: int
    ) -> ServiceResult:
        payload = await self.client.get(
            f"/hotels/{hotel_id}/room-types/availability",
            params={"checkIn": check_in, "checkOut": check_out, "numGuests": num_guests},
        )
        items = []
        for item in unwrap_list(payload):
            if isinstance(item, dict):
                item = {"hotelId": hotel_id, **item}
            items.append(item)
        return ServiceResult(_parse_list(RoomType, items), extract_session(payload))


class HttpReservationRepository(ReservationRepository):
    """The signed-in user's reservations over HTTP"""

    def __init__(self, client: AirHotelApiClient):
        self.client = client

    async def find_all(self) -> ServiceResult:
        payload = await self.client.get("/reservations")
        return ServiceResult(_parse_list(Reservation, unwrap_list(payload)), extract_session(payload))

    async def create(self, draft: ReservationDraft) -> ServiceResult:
        payload = await self.client.post("/reservations", json=draft.model_dump(by_alias=True))
        return ServiceResult(_parse_reservation(payload), extract_session(payload))

    async def update_dates(self, reservation_id: int, change: ReservationDateChange) -> ServiceResult:
        payload = await self.client.patch(
            f"/reservations/{reservation_id}", json=change.model_dump(by_alias=True)
        )
        return ServiceResult(_parse_reservation(payload), extract_session(payload))

    async def cancel(self, reservation_id: int) -> ServiceResult:
        payload = await self.client.delete(f"/reservations/{reservation_id}")
        return ServiceResult(payload, extract_session(payload))


class HttpSessionRepository(SessionRepository):
    """Session cookie in the client's jar plus the login/logout endpoints"""

    def __init__(self, client: AirHotelApiClient):
        self.client = client
        self.cookie_name = client.settings.session_cookie_name

    def has_session_indicator(self) -> bool:
        return self.client.has_cookie(self.cookie_name)

    def store_token(self, token: str) -> None:
        self.client.set_cookie(self.cookie_name, token)

    def clear_token(self) -> None:
        self.client.delete_cookie(self.cookie_name)

    async def probe(self) -> ServiceResult:
        payload = await self.client.get("/reservations")
        return ServiceResult(payload, extract_session(payload))

    async def logout(self) -> ServiceResult:
        payload = await self.client.get("/logout")
        return ServiceResult(payload, None)

    def authorization_url(self) -> str:
        return self.client.url(f"/oauth2/authorization/{self.client.settings.oauth_provider}")
