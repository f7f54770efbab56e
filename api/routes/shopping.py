"""Shopping list routes"""

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_context, get_db
from api.responses import AUTH_ERROR_RESPONSES
from domain.schemas.shopping_schemas import (
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListItemUpdate,
    ShoppingListResponse,
    ShoppingListUpdate,
)
from domain.security.context import SessionContext
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/shopping-lists", tags=["Shopping Lists"], responses=AUTH_ERROR_RESPONSES)
logger = logging.getLogger("angiday.api.shopping")


@router.get("", response_model=List[ShoppingListResponse])
def list_shopping_lists(
    limit: int = Query(20, ge=1, le=100),
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return ShoppingService.list_lists(db, ctx, limit=limit)


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_shopping_list(
    payload: ShoppingListCreate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return ShoppingService.create_list(db, ctx, payload)


@router.post(
    "/from-meal-plan/{plan_id}",
    response_model=ShoppingListResponse,
    status_code=status.HTTP_201_CREATED,
)
def build_from_meal_plan(
    plan_id: UUID,
    title: Optional[str] = Query(None, min_length=1, max_length=200),
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """Generate a list from the ingredients of every recipe scheduled in the plan"""
    return ShoppingService.build_from_meal_plan(db, ctx, plan_id, title=title)


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_shopping_list(list_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return ShoppingService.get_list(db, ctx, list_id)


@router.patch("/{list_id}", response_model=ShoppingListResponse)
def update_shopping_list(
    list_id: UUID,
    payload: ShoppingListUpdate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return ShoppingService.update_list(db, ctx, list_id, payload)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shopping_list(list_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    ShoppingService.delete_list(db, ctx, list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{list_id}/complete", response_model=ShoppingListResponse)
def complete_shopping_list(list_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return ShoppingService.complete_list(db, ctx, list_id)


@router.post("/{list_id}/total", response_model=ShoppingListResponse)
def recalculate_total(list_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    """Recompute total_cost from item actual costs, falling back to estimates"""
    return ShoppingService.recalculate_total(db, ctx, list_id)


# ---- items ----


@router.get("/{list_id}/items", response_model=List[ShoppingListItemResponse])
def list_items(list_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return ShoppingService.list_items(db, ctx, list_id)


@router.post("/{list_id}/items", response_model=ShoppingListItemResponse, status_code=status.HTTP_201_CREATED)
def add_item(
    list_id: UUID,
    payload: ShoppingListItemCreate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return ShoppingService.add_item(db, ctx, list_id, payload)


@router.patch("/{list_id}/items/{item_id}", response_model=ShoppingListItemResponse)
def update_item(
    list_id: UUID,
    item_id: UUID,
    payload: ShoppingListItemUpdate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return ShoppingService.update_item(db, ctx, list_id, item_id, payload)


@router.post("/{list_id}/items/{item_id}/check", response_model=ShoppingListItemResponse)
def check_item(
    list_id: UUID,
    item_id: UUID,
    checked: bool = Body(True, embed=True),
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return ShoppingService.check_item(db, ctx, list_id, item_id, checked)


@router.delete("/{list_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    list_id: UUID,
    item_id: UUID,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    ShoppingService.remove_item(db, ctx, list_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
