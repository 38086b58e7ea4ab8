"""Convert imported recipes into stored recipes with structured ingredients."""

import json
import math
import re
import uuid
from typing import Any

from bs4 import BeautifulSoup

from mealplanner.config import get_settings
from mealplanner.ingest.schemas import RawRecipe
from mealplanner.logging_config import LoggingContext, get_logger
from mealplanner.normalize.ingredients import parse_ingredient_lines
from mealplanner.normalize.quantity import round_half_up
from mealplanner.nutrition.arithmetic import (
    NutritionProfile,
    calculate_recipe_nutrition,
    round_nutrition,
)
from mealplanner.schemas import Ingredient, Nutrition, Recipe

logger = get_logger(__name__)

CATEGORIES = ("breakfast", "lunch", "dinner", "snack")

# schema.org NutritionInformation field -> our field
JSONLD_NUTRITION_FIELDS = {
    "calories": "calories",
    "proteinContent": "protein",
    "carbohydrateContent": "carbs",
    "fatContent": "fat",
}

_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$", re.IGNORECASE)
_LEADING_NUMBER_RE = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")


class RecipeImportError(Exception):
    """Raised when a payload does not contain a recipe at all."""


# =============================================================================
# Field Parsing
# =============================================================================


def parse_nutrient_value(value: Any) -> float:
    """
    Parse a nutrient amount to one decimal.

    Accepts numbers and strings with a leading number ("250 kcal", "12,5 g").
    Anything else is 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(value)
        if not match:
            return 0.0
        number = float(match.group(1).replace(",", "."))
    else:
        return 0.0

    if not math.isfinite(number) or number < 0:
        return 0.0
    return round_half_up(number, 1)


def parse_duration(value: Any) -> int:
    """Minutes in an ISO 8601 duration like "PT1H30M". Seconds round up."""
    if not isinstance(value, str):
        return 0
    match = _DURATION_RE.match(value.strip())
    if not match:
        return 0
    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return hours * 60 + minutes + math.ceil(seconds / 60)


def flatten_instructions(value: Any) -> list[str]:
    """Flatten strings, HowToStep and HowToSection entries into plain steps."""
    if not value:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        return []

    steps: list[str] = []
    for item in value:
        if isinstance(item, str):
            if item.strip():
                steps.append(item.strip())
        elif isinstance(item, dict):
            text = str(item.get("text") or "").strip()
            if text:
                steps.append(text)
            if isinstance(item.get("itemListElement"), list):
                steps.extend(flatten_instructions(item["itemListElement"]))
    return steps


def find_jsonld_recipe(data: Any) -> dict[str, Any] | None:
    """Find the schema.org Recipe in a JSON-LD document (direct, list or @graph)."""
    if isinstance(data, list):
        for item in data:
            found = find_jsonld_recipe(item)
            if found:
                return found
        return None

    if not isinstance(data, dict):
        return None

    type_ = data.get("@type")
    if type_ == "Recipe" or (isinstance(type_, list) and "Recipe" in type_):
        return data

    if isinstance(data.get("@graph"), list):
        return find_jsonld_recipe(data["@graph"])

    return None


def extract_jsonld_recipe(html: str) -> dict[str, Any] | None:
    """
    Scan already-fetched HTML for a JSON-LD Recipe block.

    Malformed blocks are skipped. Returns None if no block holds a recipe.
    """
    soup = BeautifulSoup(html, "html.parser")

    for script in soup.find_all("script", type="application/ld+json"):
        if not script.string:
            continue
        try:
            recipe = find_jsonld_recipe(json.loads(script.string))
        except json.JSONDecodeError:
            logger.debug("Skipping malformed JSON-LD block")
            continue
        if recipe:
            return recipe

    return None


def _first_image(value: Any) -> str | None:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("url")
    return value if isinstance(value, str) else None


def recipe_from_jsonld(data: Any, source_url: str | None = None) -> RawRecipe:
    """
    Build a RawRecipe from a JSON-LD document.

    Raises:
        RecipeImportError: If the document contains no Recipe.
    """
    recipe = find_jsonld_recipe(data)
    if recipe is None:
        raise RecipeImportError("No schema.org Recipe found in JSON-LD data")

    servings = recipe.get("recipeYield")
    if isinstance(servings, list):
        servings = servings[0] if servings else None

    nutrition_block = recipe.get("nutrition")
    nutrition = None
    if isinstance(nutrition_block, dict):
        nutrition = {
            ours: parse_nutrient_value(nutrition_block.get(theirs))
            for theirs, ours in JSONLD_NUTRITION_FIELDS.items()
        }

    return RawRecipe(
        name=recipe.get("name"),
        source_url=source_url or recipe.get("url"),
        image_url=_first_image(recipe.get("image")),
        ingredients=recipe.get("recipeIngredient") or [],
        instructions=flatten_instructions(recipe.get("recipeInstructions")),
        prep_time=parse_duration(recipe.get("prepTime")),
        cook_time=parse_duration(recipe.get("cookTime")),
        servings=servings,
        nutrition=nutrition,
    )


# =============================================================================
# Import
# =============================================================================


def import_recipe(raw: RawRecipe, recipe_id: str | None = None) -> Recipe:
    """
    Turn a raw recipe into a stored recipe.

    Ingredient lines go through the ingredient parser. The nutrition block,
    when present, is the recipe total; otherwise the total is summed from the
    ingredients. Missing or non-positive servings fall back to the configured
    default.
    """
    recipe_id = recipe_id or str(uuid.uuid4())

    with LoggingContext(recipe_id=recipe_id):
        ingredients = [Ingredient.from_parsed(p) for p in parse_ingredient_lines(raw.ingredients)]

        if raw.nutrition:
            profile = NutritionProfile.from_dict(
                {
                    field: parse_nutrient_value(raw.nutrition.get(field))
                    for field in ("calories", "protein", "carbs", "fat")
                }
            )
            nutrition = Nutrition.from_profile(round_nutrition(profile))
        else:
            nutrition = Nutrition.from_profile(calculate_recipe_nutrition(ingredients))

        servings = raw.servings
        if servings is None or servings <= 0:
            servings = get_settings().default_servings

        category = (raw.category or "").lower()
        if category not in CATEGORIES:
            category = "dinner"

        recipe = Recipe(
            id=recipe_id,
            name=raw.name,
            category=category,
            ingredients=ingredients,
            instructions=raw.instructions,
            prep_time=raw.prep_time,
            cook_time=raw.cook_time,
            servings=servings,
            nutrition=nutrition,
            source_url=raw.source_url,
            image_url=raw.image_url,
        )

        logger.info(f"Imported recipe {recipe.name!r} with {len(ingredients)} ingredients")

    return recipe
