"""
Recipe Repository - Data access layer for recipes, ingredients and tags
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.enums import RecipeVisibility, TagType
from domain.models import Recipe, RecipeIngredient, RecipeTag, Tag


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe data access"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def get_with_details(self, recipe_id: UUID) -> Optional[Recipe]:
        """Get a recipe with ingredients and tags loaded"""
        stmt = (
            select(Recipe)
            .where(Recipe.id == recipe_id)
            .options(selectinload(Recipe.ingredients), selectinload(Recipe.tags))
        )
        return self.db.scalars(stmt).first()

    def list_visible(
        self,
        visibility: RecipeVisibility = RecipeVisibility.ALL,
        owner_id: Optional[UUID] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Recipe]:
        """
        List recipes the session may see, newest first.

        Args:
            visibility: ALL keeps everything the policies allow, MINE keeps the
                rows owned by ``owner_id``, PUBLIC keeps shared rows
            owner_id: identity used by the MINE filter
        """
        stmt = select(Recipe)
        if visibility == RecipeVisibility.MINE:
            stmt = stmt.where(Recipe.user_id == owner_id)
        elif visibility == RecipeVisibility.PUBLIC:
            stmt = stmt.where(Recipe.is_public.is_(True))
        stmt = stmt.order_by(Recipe.created_at.desc(), Recipe.id).offset(skip).limit(limit)
        return list(self.db.scalars(stmt))


class RecipeIngredientRepository(BaseRepository[RecipeIngredient]):
    """Repository for recipe ingredient data access"""

    def __init__(self, db: Session):
        super().__init__(db, RecipeIngredient)

    def get_by_recipe(self, recipe_id: UUID) -> List[RecipeIngredient]:
        stmt = (
            select(RecipeIngredient)
            .where(RecipeIngredient.recipe_id == recipe_id)
            .order_by(RecipeIngredient.created_at)
        )
        return list(self.db.scalars(stmt))


class RecipeTagRepository(BaseRepository[RecipeTag]):
    """Repository for recipe/tag join rows"""

    def __init__(self, db: Session):
        super().__init__(db, RecipeTag)

    def get(self, recipe_id: UUID, tag_id: UUID) -> Optional[RecipeTag]:
        return self.db.get(RecipeTag, (recipe_id, tag_id))

    def get_by_recipe(self, recipe_id: UUID) -> List[RecipeTag]:
        return list(
            self.db.scalars(select(RecipeTag).where(RecipeTag.recipe_id == recipe_id))
        )


class TagRepository(BaseRepository[Tag]):
    """Repository for the shared tag catalog"""

    def __init__(self, db: Session):
        super().__init__(db, Tag)

    def list_tags(self, tag_type: Optional[TagType] = None) -> List[Tag]:
        stmt = select(Tag)
        if tag_type is not None:
            stmt = stmt.where(Tag.type == tag_type)
        return list(self.db.scalars(stmt.order_by(Tag.type, Tag.name)))

    def get_by_name(self, name: str, tag_type: TagType) -> Optional[Tag]:
        stmt = select(Tag).where(Tag.name == name, Tag.type == tag_type)
        return self.db.scalars(stmt).first()
