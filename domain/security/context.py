"""
Caller identity attached to a database session.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import Uuid, literal

SESSION_CONTEXT_KEY = "angiday.session_context"


class CallerRole(str, enum.Enum):
    """Who is issuing statements through a session"""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    SERVICE = "service"


@dataclass(frozen=True)
class SessionContext:
    """Explicit identity passed into every data-access call.

    ``SERVICE`` is the trusted internal path (signup provisioning, catalog
    administration, migrations); it bypasses row policies but not schema
    constraints.
    """

    role: CallerRole
    user_id: Optional[UUID] = None
    session_id: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def authenticated(
        cls,
        user_id: UUID,
        session_id: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> "SessionContext":
        if user_id is None:
            raise ValueError("authenticated context requires a user id")
        return cls(CallerRole.AUTHENTICATED, user_id, session_id, expires_at)

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls(CallerRole.ANONYMOUS)

    @classmethod
    def service(cls) -> "SessionContext":
        return cls(CallerRole.SERVICE)

    @property
    def is_authenticated(self) -> bool:
        return self.role == CallerRole.AUTHENTICATED

    @property
    def bypasses_policies(self) -> bool:
        return self.role == CallerRole.SERVICE

    def identity_expr(self):
        """The caller id as a SQL bind value, compared against owner columns."""
        return literal(self.user_id, Uuid())

    def __str__(self) -> str:
        if self.is_authenticated:
            return f"user:{self.user_id}"
        return self.role.value


def context_of(session) -> SessionContext:
    """Return the context a session was opened with (anonymous when none)."""
    ctx = session.info.get(SESSION_CONTEXT_KEY)
    if ctx is None:
        return SessionContext.anonymous()
    return ctx


def native_binding_statements(
    ctx: SessionContext, role: str, identity_setting: str
) -> List[Tuple[str, Dict[str, str]]]:
    """Statements that scope one PostgreSQL transaction to the caller.

    The caller id is published as a transaction-local setting which the
    installed policies read back; anonymous callers publish an empty value.
    Service sessions keep the connecting role.
    """
    if ctx.bypasses_policies:
        return []
    user_id = str(ctx.user_id) if ctx.is_authenticated else ""
    return [
        (f"SET LOCAL ROLE {role}", {}),
        ("SELECT set_config(:name, :value, true)", {"name": identity_setting, "value": user_id}),
    ]
