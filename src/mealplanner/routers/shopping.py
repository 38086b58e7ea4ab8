"""API routes for shopping list generation."""

from datetime import date

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mealplanner.logging_config import get_logger
from mealplanner.plan.shopping_list import (
    ShoppingList,
    aggregate_shopping_list,
    build_weekly_shopping_list,
)
from mealplanner.schemas import MealPlan, Recipe

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-list", tags=["shopping-list"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class ShoppingListRequest(BaseModel):
    """Planned recipe ids plus the recipes they refer to."""

    recipe_ids: list[str] = Field(default_factory=list, description="Duplicates allowed")
    recipes: dict[str, Recipe] = Field(default_factory=dict)


class WeeklyShoppingListRequest(BaseModel):
    """Planner week plus the recipes it refers to."""

    week_start: date
    plans: dict[str, MealPlan] = Field(default_factory=dict, description="Keyed by ISO date")
    recipes: dict[str, Recipe] = Field(default_factory=dict)


class ShoppingListItem(BaseModel):
    """Single item in the shopping list."""

    name: str
    amount: float
    unit: str
    display: str
    recipe_ids: list[str] = Field(default_factory=list)


class ShoppingListResponse(BaseModel):
    """Aggregated shopping list."""

    items: list[ShoppingListItem]
    item_count: int
    recipe_count: int
    week_start: str | None = None


def _to_response(shopping_list: ShoppingList) -> ShoppingListResponse:
    items = [
        ShoppingListItem(
            name=item.name,
            amount=item.amount,
            unit=item.unit,
            display=item.display_quantity(),
            recipe_ids=item.recipe_ids,
        )
        for item in shopping_list.items
    ]
    return ShoppingListResponse(
        items=items,
        item_count=shopping_list.item_count,
        recipe_count=shopping_list.recipe_count,
        week_start=shopping_list.week_start,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=ShoppingListResponse)
async def create_shopping_list(request: ShoppingListRequest) -> ShoppingListResponse:
    """
    Aggregate the ingredients of the given recipes.

    Ids without a matching recipe are skipped.
    """
    items = aggregate_shopping_list(request.recipe_ids, request.recipes)
    recipe_count = len({rid for rid in request.recipe_ids if rid in request.recipes})
    return _to_response(ShoppingList(items=items, recipe_count=recipe_count))


@router.post("/week", response_model=ShoppingListResponse)
async def create_weekly_shopping_list(
    request: WeeklyShoppingListRequest,
) -> ShoppingListResponse:
    """Aggregate every meal slot of a planner week."""
    logger.info(f"Generating shopping list for week starting {request.week_start}")
    shopping_list = build_weekly_shopping_list(request.plans, request.week_start, request.recipes)
    return _to_response(shopping_list)
