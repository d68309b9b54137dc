"""Async HTTP client for the AirHotel REST service"""
import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from domain.errors import ApiError
from infrastructure.config import Settings

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Unable to reach the AirHotel service."
LIST_ENVELOPE_KEYS = ("hotels", "roomTypes", "reservations", "data", "items", "content")


def extract_session(payload: Any) -> Optional[str]:
    """Session token a response body carries under ``session``, if any"""
    if isinstance(payload, dict):
        token = payload.get("session")
        if isinstance(token, str) and token:
            return token
    return None


def unwrap_list(payload: Any, keys: Iterable[str] = LIST_ENVELOPE_KEYS) -> List[Any]:
    """Accept either a bare array or an envelope holding one"""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


class AirHotelApiClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    Cookies set by the service stay in the client's jar and go out on every
    call, which is how the browser session travels. Failures surface as
    ``ApiError`` whose message is the response body text when there is one.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.base_url = settings.api_base_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.request_timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        if settings.session_cookie:
            self._seed_cookie(settings.session_cookie)

    def _seed_cookie(self, raw: str) -> None:
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            logger.warning("Ignoring malformed session cookie setting")
            return
        self.set_cookie(name.strip(), value.strip())

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def has_cookie(self, name: str) -> bool:
        try:
            return self._client.cookies.get(name) is not None
        except httpx.CookieConflict:
            return True

    def set_cookie(self, name: str, value: str) -> None:
        self._client.cookies.set(name, value)

    def delete_cookie(self, name: str) -> None:
        self._client.cookies.delete(name)

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(UNREACHABLE_MESSAGE) from e

        if not response.is_success:
            text = response.text.strip()
            logger.warning("%s %s returned %s", method, path, response.status_code)
            raise ApiError(
                text or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Dict[str, Any]) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Dict[str, Any]) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AirHotelApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
