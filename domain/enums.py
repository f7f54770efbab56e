"""
Domain enums for AngiDay application.
Contains all enumeration types used across the domain models.
"""

import enum


class TagType(str, enum.Enum):
    """Categories of the shared tag catalog"""

    CUISINE = "cuisine"
    COURSE = "course"
    DIETARY = "dietary"
    INGREDIENT = "ingredient"
    METHOD = "method"
    DIFFICULTY = "difficulty"


class MealType(str, enum.Enum):
    """Meal slots within a planned day"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class DietaryPreference(str, enum.Enum):
    """Dietary preference tags selectable on a profile"""

    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten-free"
    DAIRY_FREE = "dairy-free"
    KETO = "keto"
    PALEO = "paleo"


class RecipeVisibility(str, enum.Enum):
    """Listing filter for recipes.

    ALL returns every row the caller's policies allow; MINE and PUBLIC narrow it.
    """

    ALL = "all"
    MINE = "mine"
    PUBLIC = "public"
