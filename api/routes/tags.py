"""Tag catalog routes (read-only for callers)"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from api.dependencies import get_context, get_db
from api.responses import AUTH_ERROR_RESPONSES
from domain.enums import TagType
from domain.schemas.recipe_schemas import TagResponse
from domain.security.context import SessionContext
from services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["Tags"], responses=AUTH_ERROR_RESPONSES)
logger = logging.getLogger("angiday.api.tags")


@router.get("", response_model=List[TagResponse])
def list_tags(
    type: Optional[TagType] = Query(None, description="Restrict to one tag type"),
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return TagService.list_tags(db, ctx, type)
