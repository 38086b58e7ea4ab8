"""API routes for recipe import and per-serving nutrition."""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from mealplanner.ingest.recipe_import import (
    RecipeImportError,
    extract_jsonld_recipe,
    import_recipe,
    recipe_from_jsonld,
)
from mealplanner.ingest.schemas import RawRecipe
from mealplanner.logging_config import get_logger
from mealplanner.nutrition.arithmetic import per_serving_nutrition
from mealplanner.schemas import Nutrition, Recipe

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


class JsonLdImportRequest(BaseModel):
    """Already-fetched recipe page data: a JSON-LD document or raw HTML."""

    source_url: str | None = None
    jsonld: Any | None = Field(default=None, description="Parsed JSON-LD document")
    html: str | None = Field(default=None, description="Page HTML containing JSON-LD")


class ImportedRecipeResponse(BaseModel):
    """Imported recipe and its per-serving nutrition."""

    recipe: Recipe
    per_serving: Nutrition


def _imported(recipe: Recipe) -> ImportedRecipeResponse:
    per_serving = per_serving_nutrition(recipe.nutrition.to_profile(), recipe.servings)
    return ImportedRecipeResponse(recipe=recipe, per_serving=Nutrition.from_profile(per_serving))


@router.post("/import", response_model=ImportedRecipeResponse)
async def import_raw_recipe(raw: RawRecipe) -> ImportedRecipeResponse:
    """Import a recipe with free-text ingredient lines."""
    return _imported(import_recipe(raw))


@router.post("/import/jsonld", response_model=ImportedRecipeResponse)
async def import_jsonld_recipe(request: JsonLdImportRequest) -> ImportedRecipeResponse:
    """
    Import a recipe from schema.org JSON-LD.

    Accepts either the parsed JSON-LD document or page HTML to scan for it.
    """
    data = request.jsonld
    if data is None and request.html:
        data = extract_jsonld_recipe(request.html)

    try:
        raw = recipe_from_jsonld(data, source_url=request.source_url)
    except RecipeImportError as e:
        logger.warning(f"JSON-LD import failed for {request.source_url}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return _imported(import_recipe(raw))
