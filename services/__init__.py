"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.recipe_service import RecipeService
from services.tag_service import TagService
from services.planner_service import PlannerService
from services.shopping_service import ShoppingService
from services.auth_service import IdentityProvider, identity_provider

__all__ = [
    "ProfileService",
    "RecipeService",
    "TagService",
    "PlannerService",
    "ShoppingService",
    "IdentityProvider",
    "identity_provider",
]
