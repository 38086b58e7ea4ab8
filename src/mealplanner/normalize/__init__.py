"""Normalize free-text ingredient data into structured quantities and units."""

from mealplanner.normalize.ingredients import (
    ParsedIngredient,
    parse_ingredient_line,
    parse_ingredient_lines,
)
from mealplanner.normalize.quantity import parse_quantity, round_half_up
from mealplanner.normalize.units import (
    DISPLAY_UPSCALE,
    METRIC_TO_BASE,
    PIECE,
    TO_TASTE,
    UNIT_ALIASES,
    normalize_unit,
    to_base_unit,
    upscale_for_display,
)

__all__ = [
    "DISPLAY_UPSCALE",
    "METRIC_TO_BASE",
    "PIECE",
    "TO_TASTE",
    "UNIT_ALIASES",
    "ParsedIngredient",
    "normalize_unit",
    "parse_ingredient_line",
    "parse_ingredient_lines",
    "parse_quantity",
    "round_half_up",
    "to_base_unit",
    "upscale_for_display",
]
