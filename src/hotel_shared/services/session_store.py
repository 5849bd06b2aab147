"""Per-browser session state held by the frontend server.

A Session carries the credentials returned at login, the session's query
cache, queued flash notifications and navigation context (where to return
after login, the booking form being filled in). Sessions live in process
memory and are looked up by an opaque cookie value.

The only state transitions on credentials are set_credentials (login) and
logout. A session whose token has expired hydrates as logged out.
"""

import logging
import secrets
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any, Callable, Optional

from ..config import get_settings
from ..models.auth import AuthState, User
from ..utils.jwt import is_token_expired
from .query_cache import QueryCache

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """Flash message shown once, then auto-hidden in the browser."""

    message: str
    severity: str = "info"
    id: str = field(default_factory=lambda: secrets.token_hex(4))


@dataclass
class Session:
    """State for one browser."""

    id: str
    auth: AuthState = field(default_factory=AuthState)
    cache: QueryCache = field(default_factory=QueryCache)
    notifications: list[Notification] = field(default_factory=list)
    return_to: Optional[str] = None
    booking_context: Optional[dict[str, Any]] = None
    # Set by the payment flow between a 3-D Secure redirect and its return
    pending_payment: Optional[dict[str, Any]] = None
    last_seen: float = field(default_factory=time.monotonic)

    def set_credentials(self, user: User, token: str) -> None:
        """Record a successful login.

        Cached queries and a pending payment belong to the previous
        credentials and are dropped.
        """
        self.cache.clear()
        self.pending_payment = None
        self.auth = AuthState(
            user=user,
            token=token,
            is_authenticated=True,
            authenticated_at=datetime.now(UTC),
        )
        logger.info("Session %s authenticated as user %s", self.short_id, user.id)

    def logout(self) -> None:
        """Forget credentials and every cached query."""
        if self.auth.is_authenticated:
            logger.info("Session %s logged out", self.short_id)
        self.auth = AuthState()
        self.cache.clear()
        self.pending_payment = None

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def token(self) -> Optional[str]:
        return self.auth.token if self.auth.is_authenticated else None

    @property
    def current_user(self) -> Optional[User]:
        return self.auth.user if self.auth.is_authenticated else None

    @property
    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated

    def hydrate(self) -> None:
        """Drop credentials that can no longer be used.

        A token whose `exp` has passed, or an authenticated state missing its
        user or token, is treated as logged out.
        """
        auth = self.auth
        if not auth.is_authenticated:
            return
        if auth.user is None or not auth.token or is_token_expired(auth.token):
            logger.info("Session %s token expired or incomplete; logging out", self.short_id)
            self.logout()


class SessionStore:
    """In-process session registry keyed by cookie value.

    Usage:
        store = get_session_store()
        session = store.get_or_create(request.cookies.get("hotel_session"))
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty store.

        Args:
            ttl_seconds: Idle time after which a session is discarded.
            clock: Monotonic time source; injectable for tests.
        """
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def _is_expired(self, session: Session) -> bool:
        return self._clock() - session.last_seen > self._ttl

    def create(self) -> Session:
        session = Session(id=secrets.token_urlsafe(32), last_seen=self._clock())
        self._sessions[session.id] = session
        logger.debug("Created session %s", session.short_id)
        return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        """Return a live session, or None for unknown or idle-expired ids."""
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._is_expired(session):
            del self._sessions[session_id]
            return None
        return session

    def get_or_create(self, session_id: Optional[str]) -> Session:
        """Resolve a cookie value to a hydrated session.

        Unknown, expired or malformed cookie values yield a fresh anonymous
        session with a new id.
        """
        session = self.get(session_id)
        if session is None:
            return self.create()
        session.last_seen = self._clock()
        session.hydrate()
        return session

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Discard idle sessions.

        Returns:
            Number of sessions removed.
        """
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Purged %d idle sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Get the shared SessionStore instance (singleton pattern)."""
    return SessionStore(ttl_seconds=get_settings().session_ttl_seconds)


def reset_session_store() -> None:
    get_session_store.cache_clear()
