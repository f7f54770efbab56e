"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.profile_repository import AuthUserRepository, ProfileRepository
from repositories.recipe_repository import (
    RecipeRepository,
    RecipeIngredientRepository,
    RecipeTagRepository,
    TagRepository,
)
from repositories.meal_plan_repository import MealPlanRepository, MealPlanItemRepository
from repositories.shopping_repository import (
    ShoppingListRepository,
    ShoppingListItemRepository,
)

__all__ = [
    "BaseRepository",
    "AuthUserRepository",
    "ProfileRepository",
    "RecipeRepository",
    "RecipeIngredientRepository",
    "RecipeTagRepository",
    "TagRepository",
    "MealPlanRepository",
    "MealPlanItemRepository",
    "ShoppingListRepository",
    "ShoppingListItemRepository",
]
