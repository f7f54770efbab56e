"""
Identity provider: signup, sign-in/sign-out and session resolution.

Sessions are opaque bearer tokens kept in process memory. Resolving a token
yields the ``SessionContext`` every data access call is made with.
"""

import enum
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.exceptions import ConflictError, UnauthorizedError
from domain.models import AuthUser, open_session
from domain.security.context import SessionContext
from repositories import AuthUserRepository
from services.profile_service import ProfileService

logger = logging.getLogger("angiday.auth")


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    SESSION_EXPIRED = "SESSION_EXPIRED"


@dataclass
class IdentitySession:
    session_id: str
    access_token: str
    user_id: UUID
    expires_at: datetime

    def context(self) -> SessionContext:
        return SessionContext.authenticated(self.user_id, self.session_id, self.expires_at)


AuthListener = Callable[[AuthEvent, IdentitySession], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdentityProvider:
    """Issues and validates caller sessions.

    Account and profile rows are written through a service session: they have
    no caller policy.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        ttl_minutes: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.session_factory = session_factory
        self.ttl = timedelta(minutes=ttl_minutes or settings.session_ttl_minutes)
        self.clock = clock
        self._sessions: Dict[str, IdentitySession] = {}
        self._listeners: List[AuthListener] = []
        self._lock = threading.Lock()

    def _service_db(self):
        return open_session(SessionContext.service(), self.session_factory)

    # ---- listeners ----

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: AuthEvent, session: IdentitySession) -> None:
        logger.info(f"auth_event event={event.value} user_id={session.user_id} session_id={session.session_id}")
        for listener in list(self._listeners):
            listener(event, session)

    # ---- accounts ----

    def sign_up(self, email: str, full_name: Optional[str] = None) -> AuthUser:
        """Register an account and provision its profile"""
        db = self._service_db()
        try:
            repo = AuthUserRepository(db)
            if repo.get_by_email(email):
                raise ConflictError(f"An account for {email} already exists", code="EMAIL_TAKEN")
            user = repo.create_account(email, full_name=full_name)
            logger.info(f"account_created user_id={user.id}")
            db.expunge(user)
            return user
        finally:
            db.close()

    def sign_in(self, email: str) -> IdentitySession:
        db = self._service_db()
        try:
            user = AuthUserRepository(db).get_by_email(email)
            if not user:
                logger.warning("sign_in_failed reason=unknown_account")
                raise UnauthorizedError("Invalid login credentials", code="INVALID_CREDENTIALS")
            ProfileService.ensure_profile(db, user.id)
            user_id = user.id
        finally:
            db.close()

        session = IdentitySession(
            session_id=secrets.token_hex(8),
            access_token=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=self.clock() + self.ttl,
        )
        with self._lock:
            pruned = self._prune_expired()
            self._sessions[session.access_token] = session
        if pruned:
            logger.debug(f"sessions_pruned count={pruned}")
        self._emit(AuthEvent.SIGNED_IN, session)
        return session

    def _prune_expired(self) -> int:
        """Drop expired sessions; the caller holds the lock"""
        now = self.clock()
        expired = [token for token, s in self._sessions.items() if s.expires_at <= now]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def sign_out(self, access_token: str) -> None:
        with self._lock:
            session = self._sessions.pop(access_token, None)
        if session is None:
            raise UnauthorizedError("Session not found", code="INVALID_SESSION")
        self._emit(AuthEvent.SIGNED_OUT, session)

    def resolve(self, access_token: Optional[str]) -> SessionContext:
        """Map a bearer token to the caller context it was issued for"""
        if not access_token:
            raise UnauthorizedError("Authentication required", code="NOT_AUTHENTICATED")

        with self._lock:
            session = self._sessions.get(access_token)
            expired = session is not None and session.expires_at <= self.clock()
            if expired:
                del self._sessions[access_token]

        if session is None:
            raise UnauthorizedError("Invalid or signed-out session", code="INVALID_SESSION")
        if expired:
            self._emit(AuthEvent.SESSION_EXPIRED, session)
            raise UnauthorizedError("Session expired", code="SESSION_EXPIRED")
        return session.context()

    def reset(self) -> None:
        """Forget all sessions and listeners"""
        with self._lock:
            self._sessions.clear()
        self._listeners.clear()


identity_provider = IdentityProvider()
