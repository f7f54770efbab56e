"""
Meal planning and shopping list models.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    TIMESTAMP,
    Uuid,
    false,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import MealType


class MealPlan(Base):
    """Date-ranged meal plan"""

    __tablename__ = "meal_plans"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("auth_users.id"))
    title = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # not required to follow start_date
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    items = relationship(
        "MealPlanItem",
        back_populates="meal_plan",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MealPlanItem.date",
    )


class MealPlanItem(Base):
    """A recipe scheduled for one meal of one day"""

    __tablename__ = "meal_plan_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    meal_plan_id = Column(Uuid, ForeignKey("meal_plans.id", ondelete="CASCADE"))
    recipe_id = Column(Uuid, ForeignKey("recipes.id", ondelete="SET NULL"))
    date = Column(Date, nullable=False)
    meal_type = Column(
        SQLEnum(
            MealType,
            name="meal_type",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    servings = Column(Integer, default=1, server_default="1")
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    meal_plan = relationship("MealPlan", back_populates="items")
    recipe = relationship("Recipe")


class ShoppingList(Base):
    """Shopping list, optionally generated from a meal plan"""

    __tablename__ = "shopping_lists"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("auth_users.id"))
    title = Column(Text, nullable=False)
    meal_plan_id = Column(
        Uuid, ForeignKey("meal_plans.id", ondelete="SET NULL"), nullable=True
    )
    is_completed = Column(Boolean, default=False, server_default=false())
    total_cost = Column(Numeric(10, 2))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ShoppingListItem.created_at",
    )


class ShoppingListItem(Base):
    """Individual items in a shopping list"""

    __tablename__ = "shopping_list_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    shopping_list_id = Column(
        Uuid, ForeignKey("shopping_lists.id", ondelete="CASCADE")
    )
    ingredient_name = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2))
    unit = Column(Text)
    is_checked = Column(Boolean, default=False, server_default=false())
    category = Column(Text)  # produce, meat, dairy, etc.
    estimated_cost = Column(Numeric(10, 2))
    actual_cost = Column(Numeric(10, 2))
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    shopping_list = relationship("ShoppingList", back_populates="items")
