"""Profile routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_context, get_db
from api.responses import AUTH_ERROR_RESPONSES
from domain.schemas.profile_schemas import ProfileResponse, ProfileUpdateRequest
from domain.security.context import SessionContext
from services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"], responses=AUTH_ERROR_RESPONSES)
logger = logging.getLogger("angiday.api.profiles")


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return ProfileService.get_profile(db, ctx)


@router.patch("/me", response_model=ProfileResponse)
def update_my_profile(
    payload: ProfileUpdateRequest,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """Update username, name, avatar or dietary preferences; omitted fields are kept"""
    return ProfileService.update_profile(db, ctx, payload)
