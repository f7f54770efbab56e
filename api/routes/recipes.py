"""Recipe routes: recipes, their ingredient lines and tag assignments"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_context, get_db
from api.responses import AUTH_ERROR_RESPONSES
from domain.enums import RecipeVisibility
from domain.schemas.recipe_schemas import (
    IngredientCreate,
    IngredientResponse,
    IngredientUpdate,
    RecipeCreate,
    RecipeResponse,
    RecipeSummary,
    RecipeTagsRequest,
    RecipeUpdate,
)
from domain.security.context import SessionContext
from services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"], responses=AUTH_ERROR_RESPONSES)
logger = logging.getLogger("angiday.api.recipes")


@router.get("", response_model=List[RecipeSummary])
def list_recipes(
    visibility: RecipeVisibility = Query(RecipeVisibility.ALL),
    search: Optional[str] = Query(None, description="Matches title or description"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """Recipes the caller can see, newest first"""
    return RecipeService.list_recipes(db, ctx, visibility, search, skip=skip, limit=limit)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return RecipeService.create_recipe(db, ctx, payload)


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return RecipeService.get_recipe(db, ctx, recipe_id)


@router.patch("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: UUID,
    payload: RecipeUpdate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return RecipeService.update_recipe(db, ctx, recipe_id, payload)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    """Recipe deletion is reserved to administrative tooling; callers get 403"""
    RecipeService.delete_recipe(db, ctx, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- ingredients ----


@router.get("/{recipe_id}/ingredients", response_model=List[IngredientResponse])
def list_ingredients(recipe_id: UUID, ctx: SessionContext = Depends(get_context), db: Session = Depends(get_db)):
    return RecipeService.list_ingredients(db, ctx, recipe_id)


@router.post(
    "/{recipe_id}/ingredients",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_ingredient(
    recipe_id: UUID,
    payload: IngredientCreate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return RecipeService.add_ingredient(db, ctx, recipe_id, payload)


@router.patch("/{recipe_id}/ingredients/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    recipe_id: UUID,
    ingredient_id: UUID,
    payload: IngredientUpdate,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return RecipeService.update_ingredient(db, ctx, recipe_id, ingredient_id, payload)


@router.delete("/{recipe_id}/ingredients/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_ingredient(
    recipe_id: UUID,
    ingredient_id: UUID,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    RecipeService.remove_ingredient(db, ctx, recipe_id, ingredient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- tags ----


@router.put("/{recipe_id}/tags", response_model=RecipeResponse)
def set_tags(
    recipe_id: UUID,
    payload: RecipeTagsRequest,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """Replace the recipe's tags with the given set"""
    return RecipeService.set_tags(db, ctx, recipe_id, payload.tag_ids)


@router.post("/{recipe_id}/tags/{tag_id}", response_model=RecipeResponse)
def add_tag(
    recipe_id: UUID,
    tag_id: UUID,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return RecipeService.add_tag(db, ctx, recipe_id, tag_id)


@router.delete("/{recipe_id}/tags/{tag_id}", response_model=RecipeResponse)
def remove_tag(
    recipe_id: UUID,
    tag_id: UUID,
    ctx: SessionContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return RecipeService.remove_tag(db, ctx, recipe_id, tag_id)
