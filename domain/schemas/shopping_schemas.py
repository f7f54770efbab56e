from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from decimal import Decimal


class ShoppingListCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    meal_plan_id: Optional[UUID] = None


class ShoppingListUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    meal_plan_id: Optional[UUID] = None
    is_completed: Optional[bool] = None


class ShoppingListItemCreate(BaseModel):
    ingredient_name: str = Field(..., min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    unit: Optional[str] = None
    category: Optional[str] = Field(None, description="produce, meat, dairy, etc.")
    estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None


class ShoppingListItemUpdate(BaseModel):
    """Partial update; only fields present in the payload are written"""

    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    unit: Optional[str] = None
    is_checked: Optional[bool] = None
    category: Optional[str] = None
    estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    actual_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None


class ShoppingListItemResponse(BaseModel):
    id: UUID
    shopping_list_id: UUID
    ingredient_name: str
    amount: Optional[Decimal] = None
    unit: Optional[str] = None
    is_checked: bool = False
    category: Optional[str] = None
    estimated_cost: Optional[Decimal] = None
    actual_cost: Optional[Decimal] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ShoppingListResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    title: str
    meal_plan_id: Optional[UUID] = None
    is_completed: bool = False
    total_cost: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[ShoppingListItemResponse] = []

    model_config = {"from_attributes": True}
