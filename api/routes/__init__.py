"""API routes package"""

from . import health, auth, profiles, recipes, tags, plans, shopping

__all__ = ["health", "auth", "profiles", "recipes", "tags", "plans", "shopping"]
