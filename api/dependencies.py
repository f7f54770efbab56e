"""
API dependencies for dependency injection
"""

from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from domain.models import open_session
from domain.security.context import SessionContext
from services.auth_service import identity_provider

bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_context(access_token: Optional[str] = Depends(get_access_token)) -> SessionContext:
    """Resolve the bearer token into the caller's session context (401 otherwise)"""
    return identity_provider.resolve(access_token)


def get_db(ctx: SessionContext = Depends(get_context)) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    The session acts as the authenticated caller, so every query and write
    it issues is subject to the row policies.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db), ctx: SessionContext = Depends(get_context)):
            # Use db session here
            pass
    """
    db = open_session(ctx)
    try:
        yield db
    finally:
        db.close()
