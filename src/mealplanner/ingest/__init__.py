"""Recipe import: raw scraped or pasted recipes into structured records."""

from mealplanner.ingest.recipe_import import (
    RecipeImportError,
    extract_jsonld_recipe,
    import_recipe,
    recipe_from_jsonld,
)
from mealplanner.ingest.schemas import RawRecipe

__all__ = [
    "RawRecipe",
    "RecipeImportError",
    "extract_jsonld_recipe",
    "import_recipe",
    "recipe_from_jsonld",
]
