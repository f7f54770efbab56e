"""
Recipe catalog models: recipes, their ingredients and tags.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    TIMESTAMP,
    Uuid,
    false,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import TagType


class Tag(Base):
    """Shared tag catalog used to categorize recipes"""

    __tablename__ = "tags"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    type = Column(
        SQLEnum(
            TagType,
            name="tag_type",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class Recipe(Base):
    """A recipe owned by one identity, optionally shared publicly"""

    __tablename__ = "recipes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("auth_users.id"))
    title = Column(Text, nullable=False)
    description = Column(Text)
    instructions = Column(
        JSON().with_variant(ARRAY(Text), "postgresql"), nullable=False, default=list
    )
    prep_time_minutes = Column(Integer)
    cook_time_minutes = Column(Integer)
    servings = Column(Integer)
    difficulty = Column(Text)
    estimated_cost = Column(Numeric(10, 2))
    calories_per_serving = Column(Integer)
    image_url = Column(Text)
    source_url = Column(Text)
    source_name = Column(Text)
    is_public = Column(Boolean, default=False, server_default=false())
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RecipeIngredient.created_at",
    )
    recipe_tags = relationship(
        "RecipeTag",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tags = relationship("Tag", secondary="recipe_tags", viewonly=True)

    @property
    def total_time_minutes(self) -> int:
        return (self.prep_time_minutes or 0) + (self.cook_time_minutes or 0)


class RecipeIngredient(Base):
    """Ingredient line of a recipe"""

    __tablename__ = "recipe_ingredients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipe_id = Column(Uuid, ForeignKey("recipes.id", ondelete="CASCADE"))
    name = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2))
    unit = Column(Text)
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    recipe = relationship("Recipe", back_populates="ingredients")


class RecipeTag(Base):
    """Join row between a recipe and a catalog tag"""

    __tablename__ = "recipe_tags"

    recipe_id = Column(
        Uuid, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id = Column(Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    recipe = relationship("Recipe", back_populates="recipe_tags")
    tag = relationship("Tag")
