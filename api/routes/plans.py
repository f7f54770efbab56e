"""Meal plan routes"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_context, get_db
from api.responses import AUTH_ERROR_RESPONSES
from domain.schemas.plan_schemas import (
    MealPlanCreate,
    MealPlanItemCreate,
    MealPlanItemResponse,
    MealPlanItemUpdate,
    MealPlanResponse,
    MealPlanUpdate,
)
from domain.security.context import SessionContext
from services.planner_service import PlannerService

router = APIRouter(prefix="/meal-plans", tags=["Meal Plans"], responses=AUTH_ERROR_RESPONSES)
logger = logging.getLogger("angiday.api.plans")


@router.get("", response_model=List[MealPlanResponse])
def list_plans(
    limit: int = Query(50, ge=1, le=200),
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return PlannerService.list_plans(db, ctx, limit=limit)


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def create_plan(payload: MealPlanCreate, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return PlannerService.create_plan(db, ctx, payload)


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_plan(plan_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return PlannerService.get_plan(db, ctx, plan_id)


@router.patch("/{plan_id}", response_model=MealPlanResponse)
def update_plan(
    plan_id: UUID,
    payload: MealPlanUpdate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return PlannerService.update_plan(db, ctx, plan_id, payload)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(plan_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    """Delete a plan together with all of its items"""
    PlannerService.delete_plan(db, ctx, plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- items ----


@router.get("/{plan_id}/items", response_model=List[MealPlanItemResponse])
def list_items(plan_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    """Items of a plan ordered by date"""
    return PlannerService.list_items(db, ctx, plan_id)


@router.post("/{plan_id}/items", response_model=MealPlanItemResponse, status_code=status.HTTP_201_CREATED)
def add_item(
    plan_id: UUID,
    payload: MealPlanItemCreate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return PlannerService.add_item(db, ctx, plan_id, payload)


@router.patch("/{plan_id}/items/{item_id}", response_model=MealPlanItemResponse)
def update_item(
    plan_id: UUID,
    item_id: UUID,
    payload: MealPlanItemUpdate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return PlannerService.update_item(db, ctx, plan_id, item_id, payload)


@router.delete("/{plan_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    plan_id: UUID,
    item_id: UUID,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    PlannerService.remove_item(db, ctx, plan_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
