"""Session gateway: who is logged in on each browser client.

Login is delegated to an IdentityProvider. Every login/logout is published on
the event bus as `session.changed` so the per-client application state can load
or clear its data.
"""
import hashlib
import hmac
import logging
import re
from typing import Any, Callable, Dict, Optional, Protocol

from comida.domain.SessionUser import SessionUser
from comida.domain.errors import AuthFailure
from comida.events.Event_Bus import EventBus, SESSION_CHANGED
from comida.utilities.config import COMIDA_ACCESS_CODE

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def authenticate(self, display_name: str, access_code: str) -> SessionUser:
        ...


def _normalize_name(name: str) -> str:
    return re.sub(r"\s+", " ", (name or "").strip()).casefold()


class AccessCodeIdentityProvider:
    """Checks a shared household access code; the uid is derived from the normalized name,
    so the same person always lands in the same data namespace."""

    def __init__(self, access_code: str = COMIDA_ACCESS_CODE):
        self.access_code = access_code

    def authenticate(self, display_name: str, access_code: str) -> SessionUser:
        if not self.access_code:
            raise AuthFailure("Access code is not configured")
        normalized = _normalize_name(display_name)
        if not normalized:
            raise AuthFailure("Empty display name", user_message="Introduce tu nombre para iniciar sesión.")
        if not hmac.compare_digest((access_code or "").encode("utf-8"), self.access_code.encode("utf-8")):
            raise AuthFailure("Invalid access code", user_message="El código de acceso no es correcto.")
        uid = hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:20]
        return SessionUser(uid=uid, display_name=re.sub(r"\s+", " ", display_name.strip()))


class SessionGateway:
    def __init__(self, provider: IdentityProvider, bus: Optional[EventBus] = None):
        self._provider = provider
        self._bus = bus or EventBus()
        self._sessions: Dict[str, SessionUser] = {}

    def current_user(self, client_id: str) -> Optional[SessionUser]:
        return self._sessions.get(client_id)

    async def login(self, client_id: str, display_name: str, access_code: str) -> SessionUser:
        try:
            user = self._provider.authenticate(display_name, access_code)
        except AuthFailure:
            raise
        except Exception as e:
            logger.exception("Identity provider failed")
            raise AuthFailure(f"Identity provider failed: {e}") from e
        self._sessions[client_id] = user
        logger.info("User %s logged in", user.uid)
        await self._bus.publish_async(SESSION_CHANGED, {"client_id": client_id, "user": user})
        return user

    async def logout(self, client_id: str) -> None:
        user = self._sessions.pop(client_id, None)
        if user is not None:
            logger.info("User %s logged out", user.uid)
        await self._bus.publish_async(SESSION_CHANGED, {"client_id": client_id, "user": None})

    def subscribe(self, callback: Callable[[str, Any], Any]) -> Callable[[], None]:
        """Register callback for session changes. Returns the matching unsubscribe function."""
        self._bus.subscribe(SESSION_CHANGED, callback)

        def _unsubscribe():
            self._bus.unsubscribe(SESSION_CHANGED, callback)
        return _unsubscribe
