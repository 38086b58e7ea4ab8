"""Nutrition scaling, summing and per-serving arithmetic."""

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any

from mealplanner.normalize.quantity import round_half_up


@dataclass(frozen=True)
class NutritionProfile:
    """
    Calories and macronutrients.

    A profile is either per 100 units of the ingredient's natural measure
    (food database lookups) or absolute for a full quantity (scaled values,
    manual entries, estimates). Use ``scale_nutrition`` to go from the first
    to the second.
    """

    calories: float = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "NutritionProfile":
        """Build a profile from a mapping, treating missing or bad values as 0."""
        if not data:
            return ZERO_NUTRITION

        def _value(key: str) -> float:
            try:
                value = float(data.get(key) or 0)
            except (TypeError, ValueError):
                return 0.0
            return value if value > 0 else 0.0

        return cls(
            calories=_value("calories"),
            protein=_value("protein"),
            carbs=_value("carbs"),
            fat=_value("fat"),
        )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


ZERO_NUTRITION = NutritionProfile(calories=0, protein=0.0, carbs=0.0, fat=0.0)


def _calories(value: float) -> int:
    return int(round_half_up(value))


def _macro(value: float) -> float:
    return round_half_up(value, 1)


def scale_nutrition(per_100: NutritionProfile, amount: float) -> NutritionProfile:
    """
    Scale a per-100 profile to an actual portion.

    Calories are rounded to whole numbers, macros to one decimal.
    """
    if amount <= 0:
        return ZERO_NUTRITION

    factor = amount / 100
    return NutritionProfile(
        calories=_calories(per_100.calories * factor),
        protein=_macro(per_100.protein * factor),
        carbs=_macro(per_100.carbs * factor),
        fat=_macro(per_100.fat * factor),
    )


def round_nutrition(profile: NutritionProfile) -> NutritionProfile:
    """Round calories to a whole number and macros to one decimal."""
    return NutritionProfile(
        calories=_calories(profile.calories),
        protein=_macro(profile.protein),
        carbs=_macro(profile.carbs),
        fat=_macro(profile.fat),
    )


def sum_nutrition(*profiles: NutritionProfile) -> NutritionProfile:
    """
    Sum profiles field by field.

    Running totals are re-rounded after every addition so float drift never
    accumulates (1.1 + 1.1 + 1.1 gives 3.3, not 3.3000000000000003).
    """
    total = ZERO_NUTRITION
    for item in profiles:
        total = round_nutrition(
            NutritionProfile(
                calories=total.calories + item.calories,
                protein=total.protein + item.protein,
                carbs=total.carbs + item.carbs,
                fat=total.fat + item.fat,
            )
        )
    return total


def calculate_recipe_nutrition(ingredients: Iterable[Any]) -> NutritionProfile:
    """
    Total nutrition of a recipe from its ingredients.

    Each ingredient's ``nutrition`` is taken as already scaled to its amount;
    ingredients without one are skipped.
    """
    profiles = [
        ing.nutrition for ing in ingredients if getattr(ing, "nutrition", None) is not None
    ]
    return sum_nutrition(*profiles)


def per_serving_nutrition(total: NutritionProfile, servings: float) -> NutritionProfile:
    """Divide a recipe total by its servings. Non-positive servings return the total."""
    if servings <= 0:
        return total

    return NutritionProfile(
        calories=_calories(total.calories / servings),
        protein=_macro(total.protein / servings),
        carbs=_macro(total.carbs / servings),
        fat=_macro(total.fat / servings),
    )


def goal_progress(current: float, goal: float) -> int:
    """Percentage of a daily goal reached. Not capped at 100; 0 when goal <= 0."""
    if goal <= 0:
        return 0
    return int(round_half_up(current / goal * 100))
