import datetime as dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import MealType


class MealPlanCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    start_date: dt.date
    end_date: dt.date  # not checked against start_date
    notes: Optional[str] = None


class MealPlanUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    notes: Optional[str] = None


class MealPlanItemCreate(BaseModel):
    recipe_id: Optional[UUID] = None
    date: dt.date
    meal_type: MealType
    servings: int = Field(default=1, ge=1)
    notes: Optional[str] = None


class MealPlanItemUpdate(BaseModel):
    recipe_id: Optional[UUID] = None
    date: Optional[dt.date] = None
    meal_type: Optional[MealType] = None
    servings: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


class MealPlanItemResponse(BaseModel):
    id: UUID
    meal_plan_id: UUID
    recipe_id: Optional[UUID] = None
    date: dt.date
    meal_type: MealType
    servings: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class MealPlanResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    title: str
    start_date: dt.date
    end_date: dt.date
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    items: List[MealPlanItemResponse] = []

    model_config = {"from_attributes": True}
