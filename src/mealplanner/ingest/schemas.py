"""Pydantic schemas for validating imported recipe data."""

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator


class RawRecipe(BaseModel):
    """Recipe as delivered by a scraper or pasted by a user, ingredients unparsed."""

    name: str = Field(default="Unknown")
    source_url: str | None = None
    image_url: str | None = None
    category: str | None = None
    ingredients: list[str] = Field(default_factory=list, description="Free-text lines")
    instructions: list[str] = Field(default_factory=list)
    prep_time: int = Field(default=0, ge=0)
    cook_time: int = Field(default=0, ge=0)
    servings: int | None = None
    nutrition: dict[str, Any] | None = Field(
        default=None, description="calories/protein/carbs/fat for the whole recipe"
    )

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        """Ensure name is never None or empty."""
        if not v:
            return "Unknown"
        return str(v).strip()

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def keep_text_lines(cls, v: Any) -> list[str]:
        """Drop non-string and blank entries."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [item.strip() for item in v if isinstance(item, str) and item.strip()]

    @field_validator("servings", mode="before")
    @classmethod
    def coerce_servings(cls, v: Any) -> int | None:
        """Handle yields like "4 porzioni"; anything unusable becomes None."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return int(v)
        match = re.match(r"\s*(\d+)", str(v))
        return int(match.group(1)) if match else None
