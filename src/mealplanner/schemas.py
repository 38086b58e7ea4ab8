"""Common data schemas for recipes, meal plans and nutrition."""

from typing import Literal

from pydantic import BaseModel, Field

from mealplanner.normalize.ingredients import ParsedIngredient
from mealplanner.nutrition.arithmetic import NutritionProfile

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class Nutrition(BaseModel):
    """Calories and macros, either per 100 units or absolute."""

    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)

    def to_profile(self) -> NutritionProfile:
        return NutritionProfile(
            calories=self.calories, protein=self.protein, carbs=self.carbs, fat=self.fat
        )

    @classmethod
    def from_profile(cls, profile: NutritionProfile) -> "Nutrition":
        return cls(**profile.to_dict())


class Ingredient(BaseModel):
    """Ingredient as stored on a recipe."""

    name: str = Field(min_length=1)
    amount: float = Field(default=1.0, ge=0)
    unit: str = "pcs"
    nutrition: Nutrition | None = Field(
        default=None, description="Absolute nutrition for the listed amount"
    )

    @classmethod
    def from_parsed(cls, parsed: ParsedIngredient) -> "Ingredient":
        return cls(name=parsed.name, amount=parsed.amount, unit=parsed.unit)


class Recipe(BaseModel):
    """Recipe with structured ingredients."""

    id: str
    name: str
    category: MealType = "dinner"
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    prep_time: int = Field(default=0, ge=0, description="Minutes")
    cook_time: int = Field(default=0, ge=0, description="Minutes")
    servings: int = 4
    nutrition: Nutrition = Field(default_factory=Nutrition, description="Recipe total")
    source_url: str | None = None
    image_url: str | None = None


class MealSlots(BaseModel):
    """Recipe ids planned for each meal of a day."""

    breakfast: list[str] = Field(default_factory=list)
    lunch: list[str] = Field(default_factory=list)
    dinner: list[str] = Field(default_factory=list)
    snack: list[str] = Field(default_factory=list)


class MealPlan(BaseModel):
    """Planner entry for one day."""

    id: str
    date: str = Field(description="ISO date")
    meals: MealSlots = Field(default_factory=MealSlots)
