"""Identity routes: signup, sign-in, sign-out and the current session"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_access_token, get_context, get_db
from api.responses import AUTH_ERROR_RESPONSES
from app.config import settings
from app.exceptions import PermissionDeniedError
from domain.schemas.profile_schemas import (
    MeResponse,
    ProfileResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from domain.security.context import SessionContext
from services.auth_service import identity_provider
from services.profile_service import ProfileService

router = APIRouter(tags=["Auth"], responses=AUTH_ERROR_RESPONSES)
logger = logging.getLogger("angiday.api.auth")


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest):
    """Register an account; its profile is provisioned at the same time"""
    user = identity_provider.sign_up(payload.email, full_name=payload.full_name)
    return {"user_id": str(user.id), "email": user.email}


@router.post("/auth/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def sign_in(payload: SignInRequest):
    if not settings.passwordless_sign_in_enabled():
        logger.warning(f"sign_in_rejected environment={settings.environment.value} reason=passwordless_disabled")
        raise PermissionDeniedError(
            "Email sign-in is disabled in this environment", code="SIGN_IN_DISABLED"
        )
    session = identity_provider.sign_in(payload.email)
    return SessionResponse(
        access_token=session.access_token,
        user_id=session.user_id,
        expires_at=session.expires_at,
    )


@router.delete("/auth/sessions", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(access_token: str = Depends(get_access_token)):
    identity_provider.resolve(access_token)
    identity_provider.sign_out(access_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=MeResponse)
def me(ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    """Current identity together with its profile"""
    profile = ProfileService.get_profile(db, ctx)
    return MeResponse(
        user_id=ctx.user_id,
        expires_at=ctx.expires_at,
        profile=ProfileResponse.model_validate(profile),
    )
