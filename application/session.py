"""Session Gate"""
import logging
import webbrowser
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict

from domain.errors import ApiError
from domain.repositories import SessionRepository
from application.notifications import NotificationQueue

logger = logging.getLogger(__name__)


class SessionState(BaseModel):
    """Whether the service recognises this client, plus the last token seen"""
    model_config = ConfigDict(frozen=True)

    has_session: bool = False
    token: Optional[str] = None


class SessionGate:
    """
    Owns ``SessionState``. It changes only through ``initialize``,
    ``confirm_from_payload``/``confirm_token`` and ``logout``; no other
    component reads the cookie jar directly.
    """

    def __init__(self, repository: SessionRepository, notifications: NotificationQueue,
                 opener: Callable[[str], Any] = webbrowser.open):
        self.repository = repository
        self.notifications = notifications
        self.opener = opener
        self.state = SessionState()

    @property
    def has_session(self) -> bool:
        return self.state.has_session

    def require_session(self) -> bool:
        """Gate for every fetch and mutation. False is a normal state, not an error."""
        return self.state.has_session

    async def initialize(self) -> SessionState:
        """Recover a session left over from a previous visit"""
        if self.repository.has_session_indicator():
            self.state = SessionState(has_session=True, token=self.state.token)
            return self.state
        try:
            result = await self.repository.probe()
        except ApiError as e:
            logger.debug("Session probe failed, staying signed out: %s", e)
            return self.state
        self.state = SessionState(has_session=True, token=self.state.token)
        self.confirm_token(result.session)
        return self.state

    def confirm_from_payload(self, payload: Any) -> bool:
        token = payload.get("session") if isinstance(payload, dict) else None
        return self.confirm_token(token if isinstance(token, str) else None)

    def confirm_token(self, token: Optional[str]) -> bool:
        """Persist a fresh token from a response body. Returns True when one was present."""
        if not token:
            return False
        self.repository.store_token(token)
        self.state = SessionState(has_session=True, token=token)
        return True

    async def logout(self) -> bool:
        """End the session. The caller clears cached hotels and reservations on True."""
        try:
            await self.repository.logout()
        except ApiError as e:
            logger.warning("Logout failed: %s", e.message)
            self.notifications.error(e.message or "Logout failed")
            return False
        self.repository.clear_token()
        self.state = SessionState()
        self.notifications.success("Logged out successfully")
        return True

    def login_url(self) -> str:
        return self.repository.authorization_url()

    def login(self) -> str:
        """Send the browser to the identity provider; the session arrives out of band"""
        url = self.login_url()
        logger.info("Redirecting to %s", url)
        self.opener(url)
        return url
