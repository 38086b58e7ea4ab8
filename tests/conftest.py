"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from mealplanner.schemas import Ingredient, MealPlan, MealSlots, Recipe

# =============================================================================
# Recipe Fixtures
# =============================================================================


def make_recipe(recipe_id: str, *ingredients: tuple[str, float, str], **kwargs) -> Recipe:
    """Build a recipe from (name, amount, unit) tuples."""
    return Recipe(
        id=recipe_id,
        name=kwargs.pop("name", f"Recipe {recipe_id}"),
        ingredients=[Ingredient(name=n, amount=a, unit=u) for n, a, u in ingredients],
        **kwargs,
    )


@pytest.fixture
def recipe_factory():
    """Factory for ad-hoc recipes."""
    return make_recipe


@pytest.fixture
def carbonara() -> Recipe:
    """Pasta alla carbonara, Italian units."""
    return make_recipe(
        "carbonara",
        ("Spaghetti", 320, "g"),
        ("Guanciale", 150, "g"),
        ("Tuorli", 6, "pcs"),
        ("Pecorino", 50, "g"),
        ("Pepe nero", 0, "to taste"),
        name="Spaghetti alla carbonara",
        servings=4,
    )


@pytest.fixture
def pancakes() -> Recipe:
    """Pancakes, English units."""
    return make_recipe(
        "pancakes",
        ("Flour", 250, "g"),
        ("Milk", 500, "ml"),
        ("Eggs", 2, "pcs"),
        ("Salt", 0, "to taste"),
        name="Pancakes",
        category="breakfast",
        servings=2,
    )


@pytest.fixture
def besciamella() -> Recipe:
    """Besciamella with litres and a pinch of nutmeg."""
    return make_recipe(
        "besciamella",
        ("Latte", 1, "l"),
        ("Burro", 100, "g"),
        ("Farina", 100, "g"),
        ("Noce moscata", 1, "pinch"),
        ("Sale", 0, "to taste"),
        name="Besciamella",
    )


@pytest.fixture
def recipes_by_id(carbonara: Recipe, pancakes: Recipe, besciamella: Recipe) -> dict[str, Recipe]:
    """Recipe lookup keyed by id."""
    return {r.id: r for r in (carbonara, pancakes, besciamella)}


# =============================================================================
# Planner Fixtures
# =============================================================================


@pytest.fixture
def week_plans() -> dict[str, MealPlan]:
    """Planner entries around the week starting 2026-10-19."""
    return {
        "2026-10-19": MealPlan(
            id="p1",
            date="2026-10-19",
            meals=MealSlots(breakfast=["pancakes"], dinner=["carbonara"]),
        ),
        "2026-10-21": MealPlan(
            id="p2",
            date="2026-10-21",
            meals=MealSlots(lunch=["carbonara"], snack=["deleted-recipe"]),
        ),
        # Outside the week
        "2026-10-26": MealPlan(
            id="p3",
            date="2026-10-26",
            meals=MealSlots(dinner=["besciamella"]),
        ),
    }


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Test client for the API."""
    from mealplanner.main import app

    return TestClient(app)
