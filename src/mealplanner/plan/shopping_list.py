"""Shopping list generation from planned recipes."""

import math
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from mealplanner.logging_config import get_logger
from mealplanner.normalize.quantity import parse_quantity, round_half_up
from mealplanner.normalize.units import (
    TO_TASTE,
    normalize_unit,
    to_base_unit,
    upscale_for_display,
)

logger = get_logger(__name__)

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


@dataclass
class ShoppingItem:
    """A single aggregated item in the shopping list."""

    name: str
    amount: float
    unit: str
    recipe_ids: list[str] = field(default_factory=list, compare=False)

    @property
    def is_to_taste(self) -> bool:
        return self.unit == TO_TASTE

    def display_quantity(self) -> str:
        """Get human-readable quantity string."""
        if self.is_to_taste:
            return "q.b."
        if self.amount == int(self.amount):
            return f"{int(self.amount)} {self.unit}"
        return f"{self.amount:.1f} {self.unit}"

    def _add_source(self, recipe_id: str) -> None:
        if recipe_id not in self.recipe_ids:
            self.recipe_ids.append(recipe_id)


@dataclass
class ShoppingList:
    """Shopping list for a set of planned recipes."""

    items: list[ShoppingItem] = field(default_factory=list)
    recipe_count: int = 0
    week_start: str | None = None

    @property
    def item_count(self) -> int:
        return len(self.items)


def _get(obj: Any, key: str) -> Any:
    """Read a field from either a mapping or an object."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _coerce_amount(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) and value > 0 else 0.0
    return parse_quantity(str(value) if value is not None else None)


def _sort_key(item: ShoppingItem) -> str:
    # Accent- and case-insensitive, so "Óregano" sorts with "oregano"
    decomposed = unicodedata.normalize("NFKD", item.name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def aggregate_shopping_list(
    recipe_ids: Iterable[str],
    recipes_by_id: Mapping[str, Any],
) -> list[ShoppingItem]:
    """
    Aggregate the ingredients of planned recipes into a deduplicated list.

    Every occurrence of a recipe id contributes its ingredients again.
    Ids missing from the lookup are skipped. Quantities merge when the
    lower-cased name and the base unit (g, ml, or the normalized unit when
    there is no metric conversion) match; to-taste items merge by name alone
    into a single zero-amount entry. First-seen capitalization is kept.

    Args:
        recipe_ids: Planned recipe ids, duplicates allowed.
        recipes_by_id: Lookup of recipe records exposing ``ingredients``.

    Returns:
        Items sorted by name, amounts upscaled for display (g -> kg,
        ml -> l) and rounded to one decimal.
    """
    quantified: dict[tuple[str, str], ShoppingItem] = {}
    to_taste: dict[str, ShoppingItem] = {}
    recipes_seen = 0

    for recipe_id in recipe_ids:
        recipe = recipes_by_id.get(recipe_id)
        if recipe is None:
            logger.debug(f"Recipe {recipe_id} not found, skipping")
            continue
        recipes_seen += 1

        for ing in _get(recipe, "ingredients") or []:
            name = str(_get(ing, "name") or "").strip()
            if not name:
                continue

            unit = normalize_unit(_get(ing, "unit"))

            if unit == TO_TASTE:
                key = name.lower()
                if key not in to_taste:
                    to_taste[key] = ShoppingItem(name=name, amount=0.0, unit=TO_TASTE)
                to_taste[key]._add_source(recipe_id)
                continue

            amount, base_unit = to_base_unit(_coerce_amount(_get(ing, "amount")), unit)
            merge_key = (name.lower(), base_unit)
            existing = quantified.get(merge_key)
            if existing is None:
                existing = ShoppingItem(name=name, amount=0.0, unit=base_unit)
                quantified[merge_key] = existing
            existing.amount += amount
            existing._add_source(recipe_id)

    for item in quantified.values():
        amount, unit = upscale_for_display(item.amount, item.unit)
        amount = round_half_up(amount, 1)
        if unit == item.unit:
            # 999.96 g rounds to 1000 g, which displays as 1 kg
            amount, unit = upscale_for_display(amount, unit)
        item.amount = round_half_up(amount, 1)
        item.unit = unit

    items = sorted([*quantified.values(), *to_taste.values()], key=_sort_key)

    logger.info(f"Aggregated {len(items)} shopping items from {recipes_seen} planned recipes")

    return items


# =============================================================================
# Weekly Planner
# =============================================================================


def week_dates(week_start: date | str) -> list[str]:
    """ISO dates of the seven days starting at ``week_start``."""
    start = date.fromisoformat(week_start) if isinstance(week_start, str) else week_start
    return [(start + timedelta(days=offset)).isoformat() for offset in range(7)]


def planned_recipe_ids(plans: Mapping[str, Any], week_start: date | str) -> list[str]:
    """
    Flatten every meal slot of a week into recipe ids.

    Args:
        plans: Meal plans keyed by ISO date, each with ``meals`` per meal type.
        week_start: First day of the week.

    Returns:
        Recipe ids in day then meal-type order, duplicates kept.
    """
    recipe_ids: list[str] = []
    for day in week_dates(week_start):
        meals = _get(plans.get(day), "meals")
        if meals is None:
            continue
        for meal_type in MEAL_TYPES:
            recipe_ids.extend(_get(meals, meal_type) or [])
    return recipe_ids


def build_weekly_shopping_list(
    plans: Mapping[str, Any],
    week_start: date | str,
    recipes_by_id: Mapping[str, Any],
) -> ShoppingList:
    """Build the shopping list for one planner week."""
    recipe_ids = planned_recipe_ids(plans, week_start)
    start = week_start if isinstance(week_start, str) else week_start.isoformat()

    shopping_list = ShoppingList(
        items=aggregate_shopping_list(recipe_ids, recipes_by_id),
        recipe_count=len({rid for rid in recipe_ids if rid in recipes_by_id}),
        week_start=start,
    )

    logger.info(
        f"Built shopping list for week {start}: "
        f"{shopping_list.item_count} items from {shopping_list.recipe_count} recipes"
    )

    return shopping_list
