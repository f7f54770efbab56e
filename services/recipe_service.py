"""Recipe service: recipe catalog, ingredient lines and tag assignments."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.enums import RecipeVisibility
from domain.models import Recipe, RecipeIngredient, RecipeTag
from domain.schemas.recipe_schemas import (
    IngredientCreate,
    IngredientUpdate,
    RecipeCreate,
    RecipeUpdate,
)
from domain.security.context import SessionContext
from repositories import RecipeIngredientRepository, RecipeRepository, RecipeTagRepository

logger = logging.getLogger("angiday.recipe")


def matches_search(recipe: Recipe, query: Optional[str]) -> bool:
    """Case-insensitive substring match on title or description."""
    if not query:
        return True
    needle = query.lower()
    return needle in (recipe.title or "").lower() or needle in (recipe.description or "").lower()


class RecipeService:
    """Business logic for recipes.

    Ownership is never checked here: the session is bound to the caller and the
    row policies decide what it may see and change.
    """

    @staticmethod
    def list_recipes(
        db: Session,
        ctx: SessionContext,
        visibility: RecipeVisibility = RecipeVisibility.ALL,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Recipe]:
        """List visible recipes, newest first, optionally filtered by a search term"""
        recipes = RecipeRepository(db).list_visible(
            visibility=visibility, owner_id=ctx.user_id, skip=skip, limit=limit
        )
        result = [r for r in recipes if matches_search(r, search)]
        logger.info(
            f"recipes_listed caller={ctx} visibility={visibility.value} "
            f"search={search!r} count={len(result)}"
        )
        return result

    @staticmethod
    def get_recipe(db: Session, ctx: SessionContext, recipe_id: UUID) -> Recipe:
        recipe = RecipeRepository(db).get_with_details(recipe_id)
        if not recipe:
            logger.warning(f"recipe_not_found recipe_id={recipe_id} caller={ctx}")
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    @staticmethod
    def create_recipe(db: Session, ctx: SessionContext, data: RecipeCreate) -> Recipe:
        """Create a recipe with its ingredient lines and tags in one transaction.

        An explicit ``user_id`` other than the caller's is rejected by the
        insert policy.
        """
        fields = data.model_dump(exclude={"ingredients", "tag_ids", "user_id"})
        recipe = Recipe(user_id=data.user_id or ctx.user_id, **fields)
        recipe.ingredients = [RecipeIngredient(**i.model_dump()) for i in data.ingredients]
        recipe.recipe_tags = [RecipeTag(tag_id=tag_id) for tag_id in dict.fromkeys(data.tag_ids)]

        recipe = RecipeRepository(db).create(recipe)
        logger.info(
            f"recipe_created recipe_id={recipe.id} owner={recipe.user_id} "
            f"ingredients={len(data.ingredients)} tags={len(data.tag_ids)}"
        )
        return recipe

    @staticmethod
    def update_recipe(
        db: Session, ctx: SessionContext, recipe_id: UUID, data: RecipeUpdate
    ) -> Recipe:
        """Partial update; only the fields present in the payload are written"""
        repo = RecipeRepository(db)
        recipe = RecipeService.get_recipe(db, ctx, recipe_id)
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return recipe
        recipe = repo.update(recipe, **fields)
        logger.info(f"recipe_updated recipe_id={recipe_id} fields={sorted(fields)}")
        return recipe

    @staticmethod
    def delete_recipe(db: Session, ctx: SessionContext, recipe_id: UUID) -> None:
        """Delete a recipe; ingredients and tag links go with it.

        Callers have no delete policy on recipes, so only a service session
        succeeds. Meal plan items that scheduled it keep their slot with no
        recipe.
        """
        repo = RecipeRepository(db)
        recipe = repo.get_by_id(recipe_id)
        if not recipe:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        repo.delete(recipe)
        logger.info(f"recipe_deleted recipe_id={recipe_id} caller={ctx}")

    # ---- ingredients ----

    @staticmethod
    def list_ingredients(db: Session, ctx: SessionContext, recipe_id: UUID) -> List[RecipeIngredient]:
        RecipeService.get_recipe(db, ctx, recipe_id)
        return RecipeIngredientRepository(db).get_by_recipe(recipe_id)

    @staticmethod
    def add_ingredient(
        db: Session, ctx: SessionContext, recipe_id: UUID, data: IngredientCreate
    ) -> RecipeIngredient:
        ingredient = RecipeIngredientRepository(db).create(
            RecipeIngredient(recipe_id=recipe_id, **data.model_dump())
        )
        logger.info(f"ingredient_added recipe_id={recipe_id} ingredient_id={ingredient.id}")
        return ingredient

    @staticmethod
    def _get_ingredient(db: Session, recipe_id: UUID, ingredient_id: UUID) -> RecipeIngredient:
        ingredient = RecipeIngredientRepository(db).get_by_id(ingredient_id)
        if not ingredient or ingredient.recipe_id != recipe_id:
            raise NotFoundError(f"Ingredient {ingredient_id} not found in recipe {recipe_id}")
        return ingredient

    @staticmethod
    def update_ingredient(
        db: Session,
        ctx: SessionContext,
        recipe_id: UUID,
        ingredient_id: UUID,
        data: IngredientUpdate,
    ) -> RecipeIngredient:
        ingredient = RecipeService._get_ingredient(db, recipe_id, ingredient_id)
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return ingredient
        ingredient = RecipeIngredientRepository(db).update(ingredient, **fields)
        logger.info(f"ingredient_updated ingredient_id={ingredient_id} fields={sorted(fields)}")
        return ingredient

    @staticmethod
    def remove_ingredient(
        db: Session, ctx: SessionContext, recipe_id: UUID, ingredient_id: UUID
    ) -> None:
        ingredient = RecipeService._get_ingredient(db, recipe_id, ingredient_id)
        RecipeIngredientRepository(db).delete(ingredient)
        logger.info(f"ingredient_removed recipe_id={recipe_id} ingredient_id={ingredient_id}")

    # ---- tags ----

    @staticmethod
    def set_tags(db: Session, ctx: SessionContext, recipe_id: UUID, tag_ids: List[UUID]) -> Recipe:
        """Replace the recipe's tag set.

        The tag links are written directly; the recipe_tags policy rejects the
        change unless the caller owns the recipe.
        """
        repo = RecipeTagRepository(db)
        wanted = list(dict.fromkeys(tag_ids))
        current = {link.tag_id: link for link in repo.get_by_recipe(recipe_id)}

        for tag_id, link in current.items():
            if tag_id not in wanted:
                db.delete(link)
        for tag_id in wanted:
            if tag_id not in current:
                db.add(RecipeTag(recipe_id=recipe_id, tag_id=tag_id))

        repo.commit()
        logger.info(f"recipe_tags_set recipe_id={recipe_id} tags={len(wanted)}")
        return RecipeService.get_recipe(db, ctx, recipe_id)

    @staticmethod
    def add_tag(db: Session, ctx: SessionContext, recipe_id: UUID, tag_id: UUID) -> Recipe:
        repo = RecipeTagRepository(db)
        if not repo.get(recipe_id, tag_id):
            repo.create(RecipeTag(recipe_id=recipe_id, tag_id=tag_id))
            logger.info(f"recipe_tag_added recipe_id={recipe_id} tag_id={tag_id}")
        return RecipeService.get_recipe(db, ctx, recipe_id)

    @staticmethod
    def remove_tag(db: Session, ctx: SessionContext, recipe_id: UUID, tag_id: UUID) -> Recipe:
        repo = RecipeTagRepository(db)
        link = repo.get(recipe_id, tag_id)
        if not link:
            raise NotFoundError(f"Tag {tag_id} is not attached to recipe {recipe_id}")
        repo.delete(link)
        logger.info(f"recipe_tag_removed recipe_id={recipe_id} tag_id={tag_id}")
        return RecipeService.get_recipe(db, ctx, recipe_id)
