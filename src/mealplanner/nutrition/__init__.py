"""Nutrition arithmetic shared by recipes, dashboards and the food log."""

from mealplanner.nutrition.arithmetic import (
    ZERO_NUTRITION,
    NutritionProfile,
    calculate_recipe_nutrition,
    goal_progress,
    per_serving_nutrition,
    round_nutrition,
    scale_nutrition,
    sum_nutrition,
)

__all__ = [
    "ZERO_NUTRITION",
    "NutritionProfile",
    "calculate_recipe_nutrition",
    "goal_progress",
    "per_serving_nutrition",
    "round_nutrition",
    "scale_nutrition",
    "sum_nutrition",
]
