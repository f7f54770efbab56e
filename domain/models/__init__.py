"""
Domain models package - SQLAlchemy ORM models.

Importing this package also installs the row policy hooks, so no session can
touch the protected tables without them.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    create_app_engine,
    open_session,
    init_database,
)
from domain.models.user import AuthUser, Profile
from domain.models.recipe import Tag, Recipe, RecipeIngredient, RecipeTag
from domain.models.meal_plan import (
    MealPlan,
    MealPlanItem,
    ShoppingList,
    ShoppingListItem,
)

import domain.security.enforcement  # noqa: E402,F401  (registers session hooks)

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "create_app_engine",
    "open_session",
    "init_database",
    # Identity models
    "AuthUser",
    "Profile",
    # Recipe models
    "Tag",
    "Recipe",
    "RecipeIngredient",
    "RecipeTag",
    # Meal plan models
    "MealPlan",
    "MealPlanItem",
    "ShoppingList",
    "ShoppingListItem",
]
