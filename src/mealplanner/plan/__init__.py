"""Weekly planning and shopping list aggregation."""

from mealplanner.plan.shopping_list import (
    MEAL_TYPES,
    ShoppingItem,
    ShoppingList,
    aggregate_shopping_list,
    build_weekly_shopping_list,
    planned_recipe_ids,
    week_dates,
)

__all__ = [
    "MEAL_TYPES",
    "ShoppingItem",
    "ShoppingList",
    "aggregate_shopping_list",
    "build_weekly_shopping_list",
    "planned_recipe_ids",
    "week_dates",
]
