"""API routes for nutrition arithmetic."""

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from mealplanner.nutrition.arithmetic import (
    goal_progress,
    per_serving_nutrition,
    scale_nutrition,
    sum_nutrition,
)
from mealplanner.schemas import Nutrition

router = APIRouter(prefix="/api/v1/nutrition", tags=["nutrition"])


class ScaleRequest(BaseModel):
    """Per-100 profile and the portion to scale it to."""

    per_100: Nutrition
    amount: float = Field(ge=0, description="Portion in the profile's unit (g or ml)")


class SumRequest(BaseModel):
    """Absolute profiles to add up."""

    items: list[Nutrition] = Field(default_factory=list)


class PerServingRequest(BaseModel):
    """Recipe total and its servings."""

    total: Nutrition
    servings: float


class GoalProgressResponse(BaseModel):
    """Percent of a goal reached, not capped."""

    percent: int


@router.post("/scale", response_model=Nutrition)
async def scale(request: ScaleRequest) -> Nutrition:
    """Scale a per-100 profile to a portion."""
    return Nutrition.from_profile(scale_nutrition(request.per_100.to_profile(), request.amount))


@router.post("/sum", response_model=Nutrition)
async def total(request: SumRequest) -> Nutrition:
    """Sum absolute profiles."""
    return Nutrition.from_profile(sum_nutrition(*(item.to_profile() for item in request.items)))


@router.post("/per-serving", response_model=Nutrition)
async def per_serving(request: PerServingRequest) -> Nutrition:
    """Per-serving view of a recipe total."""
    return Nutrition.from_profile(
        per_serving_nutrition(request.total.to_profile(), request.servings)
    )


@router.get("/goal-progress", response_model=GoalProgressResponse)
async def progress(
    current: float = Query(..., ge=0),
    goal: float = Query(...),
) -> GoalProgressResponse:
    """Percent of a daily goal reached."""
    return GoalProgressResponse(percent=goal_progress(current, goal))
