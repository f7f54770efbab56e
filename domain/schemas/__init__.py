"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.profile_schemas import (
    SignUpRequest,
    SignInRequest,
    SessionResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    MeResponse,
)
from domain.schemas.recipe_schemas import (
    TagCreate,
    TagResponse,
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
    RecipeCreate,
    RecipeUpdate,
    RecipeSummary,
    RecipeResponse,
    RecipeTagsRequest,
)
from domain.schemas.plan_schemas import (
    MealPlanCreate,
    MealPlanUpdate,
    MealPlanItemCreate,
    MealPlanItemUpdate,
    MealPlanItemResponse,
    MealPlanResponse,
)
from domain.schemas.shopping_schemas import (
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
    ShoppingListItemResponse,
    ShoppingListResponse,
)

__all__ = [
    # Identity / profile schemas
    "SignUpRequest",
    "SignInRequest",
    "SessionResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "MeResponse",
    # Recipe schemas
    "TagCreate",
    "TagResponse",
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientResponse",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeSummary",
    "RecipeResponse",
    "RecipeTagsRequest",
    # Meal plan schemas
    "MealPlanCreate",
    "MealPlanUpdate",
    "MealPlanItemCreate",
    "MealPlanItemUpdate",
    "MealPlanItemResponse",
    "MealPlanResponse",
    # Shopping schemas
    "ShoppingListCreate",
    "ShoppingListUpdate",
    "ShoppingListItemCreate",
    "ShoppingListItemUpdate",
    "ShoppingListItemResponse",
    "ShoppingListResponse",
]
