"""Pydantic schemas for recipes, their ingredients and catalog tags."""

from pydantic import BaseModel, Field, computed_field
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from domain.enums import TagType


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: TagType


class TagResponse(BaseModel):
    id: UUID
    name: str
    type: TagType
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    unit: Optional[str] = None
    notes: Optional[str] = None


class IngredientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    unit: Optional[str] = None
    notes: Optional[str] = None


class IngredientResponse(BaseModel):
    id: UUID
    recipe_id: UUID
    name: str
    amount: Optional[Decimal] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class RecipeCreate(BaseModel):
    """New recipe; the owner is always the calling identity unless given explicitly"""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: List[str] = Field(default_factory=list)
    prep_time_minutes: Optional[int] = Field(None, ge=0)
    cook_time_minutes: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[str] = None
    estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    calories_per_serving: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    source_name: Optional[str] = None
    is_public: bool = False
    user_id: Optional[UUID] = Field(
        None, description="Owner id; must equal the caller's identity when given"
    )
    ingredients: List[IngredientCreate] = Field(default_factory=list)
    tag_ids: List[UUID] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    """Partial recipe update; omitted fields are left untouched"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: Optional[List[str]] = None
    prep_time_minutes: Optional[int] = Field(None, ge=0)
    cook_time_minutes: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[str] = None
    estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    calories_per_serving: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    source_name: Optional[str] = None
    is_public: Optional[bool] = None


class RecipeSummary(BaseModel):
    """Recipe card shown in listings"""

    id: UUID
    user_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    prep_time_minutes: Optional[int] = None
    cook_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    image_url: Optional[str] = None
    is_public: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def total_time_minutes(self) -> int:
        return (self.prep_time_minutes or 0) + (self.cook_time_minutes or 0)


class RecipeResponse(RecipeSummary):
    instructions: List[str] = []
    estimated_cost: Optional[Decimal] = None
    calories_per_serving: Optional[int] = None
    source_url: Optional[str] = None
    source_name: Optional[str] = None
    updated_at: Optional[datetime] = None
    ingredients: List[IngredientResponse] = []
    tags: List[TagResponse] = []


class RecipeTagsRequest(BaseModel):
    tag_ids: List[UUID]
