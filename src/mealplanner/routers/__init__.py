"""API routers for the mealplanner application."""

from mealplanner.routers.ingredients import router as ingredients_router
from mealplanner.routers.nutrition import router as nutrition_router
from mealplanner.routers.recipes import router as recipes_router
from mealplanner.routers.shopping import router as shopping_router

__all__ = [
    "ingredients_router",
    "nutrition_router",
    "recipes_router",
    "shopping_router",
]
