"""Unit tests for shopping list aggregation and the weekly planner."""

from datetime import date

import pytest

from mealplanner.normalize.ingredients import parse_ingredient_line
from mealplanner.normalize.units import PIECE, TO_TASTE
from mealplanner.plan.shopping_list import (
    ShoppingItem,
    ShoppingList,
    aggregate_shopping_list,
    build_weekly_shopping_list,
    planned_recipe_ids,
    week_dates,
)
from mealplanner.schemas import MealPlan, MealSlots

# =============================================================================
# Aggregation Tests
# =============================================================================


class TestAggregateShoppingList:
    """Tests for aggregate_shopping_list function."""

    def test_metric_conversion_then_upscale(self, recipe_factory):
        """Test 500 ml + 1 l of the same ingredient gives 1.5 l."""
        recipes = {
            "a": recipe_factory("a", ("Latte", 500, "ml")),
            "b": recipe_factory("b", ("Latte", 1, "l")),
        }
        assert aggregate_shopping_list(["a", "b"], recipes) == [
            ShoppingItem(name="Latte", amount=1.5, unit="l")
        ]

    def test_to_taste_collapses(self, recipe_factory):
        """Test three "Sale q.b." give exactly one zero-amount item."""
        recipes = {
            rid: recipe_factory(rid, ("Sale", 0, "to taste")) for rid in ("a", "b", "c")
        }
        result = aggregate_shopping_list(["a", "b", "c"], recipes)
        assert result == [ShoppingItem(name="Sale", amount=0, unit=TO_TASTE)]
        assert result[0].recipe_ids == ["a", "b", "c"]

    def test_to_taste_alias_units_collapse(self, recipe_factory):
        """Test raw "q.b." units normalize to the sentinel before merging."""
        recipes = {
            "a": recipe_factory("a", ("Sale", 0, "q.b.")),
            "b": recipe_factory("b", ("sale", 3, "to taste")),
        }
        assert aggregate_shopping_list(["a", "b"], recipes) == [
            ShoppingItem(name="Sale", amount=0, unit=TO_TASTE)
        ]

    def test_empty_input(self, recipes_by_id):
        """Test an empty recipe set gives an empty list."""
        assert aggregate_shopping_list([], recipes_by_id) == []

    def test_missing_recipes_are_skipped(self, recipes_by_id):
        """Test ids absent from the lookup are ignored without error."""
        assert aggregate_shopping_list(["gone", "also-gone"], recipes_by_id) == []
        assert aggregate_shopping_list(["gone"], {}) == []

    def test_duplicate_ids_contribute_twice(self, recipe_factory):
        """Test a recipe planned twice counts twice."""
        recipes = {"a": recipe_factory("a", ("Farina", 200, "g"))}
        assert aggregate_shopping_list(["a", "a"], recipes) == [
            ShoppingItem(name="Farina", amount=400, unit="g")
        ]

    def test_name_merge_is_case_insensitive(self, recipe_factory):
        """Test names merge case-insensitively and keep first-seen capitalization."""
        recipes = {
            "a": recipe_factory("a", ("Farina", 200, "g")),
            "b": recipe_factory("b", ("farina", 300, "g")),
        }
        assert aggregate_shopping_list(["a", "b"], recipes) == [
            ShoppingItem(name="Farina", amount=500, unit="g")
        ]

    def test_mixed_scale_weight(self, recipe_factory):
        """Test grams and kilograms sum in grams, then upscale."""
        recipes = {
            "a": recipe_factory("a", ("Patate", 600, "g")),
            "b": recipe_factory("b", ("Patate", 0.5, "kg")),
        }
        assert aggregate_shopping_list(["a", "b"], recipes) == [
            ShoppingItem(name="Patate", amount=1.1, unit="kg")
        ]

    def test_rounding_up_to_threshold_upscales(self, recipe_factory):
        """Test a total that rounds to 1000 g is shown as 1 kg."""
        recipes = {"a": recipe_factory("a", ("Burro", 500, "g"), ("Burro", 499.96, "g"))}
        result = aggregate_shopping_list(["a"], recipes)
        assert result == [ShoppingItem(name="Burro", amount=1, unit="kg")]
        assert result[0].display_quantity() == "1 kg"

    def test_below_threshold_stays_in_base_unit(self, recipe_factory):
        """Test small totals stay in g even when sourced in kg."""
        recipes = {"a": recipe_factory("a", ("Zucchero", 0.25, "kg"))}
        assert aggregate_shopping_list(["a"], recipes) == [
            ShoppingItem(name="Zucchero", amount=250, unit="g")
        ]

    def test_centilitres_and_decilitres(self, recipe_factory):
        """Test cl and dl convert to ml before summing."""
        recipes = {"a": recipe_factory("a", ("Panna", 20, "cl"), ("Panna", 3, "dl"))}
        assert aggregate_shopping_list(["a"], recipes) == [
            ShoppingItem(name="Panna", amount=500, unit="ml")
        ]

    def test_display_rounding(self, recipe_factory):
        """Test the displayed amount is rounded to one decimal, ties up."""
        recipes = {"a": recipe_factory("a", ("Farina", 1, "kg"), ("Farina", 255, "g"))}
        assert aggregate_shopping_list(["a"], recipes) == [
            ShoppingItem(name="Farina", amount=1.3, unit="kg")
        ]

    def test_non_metric_units_sum_without_conversion(self, recipe_factory):
        """Test tbsp and pieces sum in their own unit."""
        recipes = {
            "a": recipe_factory("a", ("Olio", 2, "cucchiai"), ("Uova", 2, "pcs")),
            "b": recipe_factory("b", ("Olio", 1, "tbsp"), ("Uova", 3, "pz")),
        }
        assert aggregate_shopping_list(["a", "b"], recipes) == [
            ShoppingItem(name="Olio", amount=3, unit="tbsp"),
            ShoppingItem(name="Uova", amount=5, unit=PIECE),
        ]

    def test_different_base_units_stay_separate(self, recipe_factory):
        """Test the same name with weight and volume gives two items."""
        recipes = {"a": recipe_factory("a", ("Latte", 200, "ml"), ("Latte", 50, "g"))}
        result = aggregate_shopping_list(["a"], recipes)
        assert len(result) == 2
        assert {item.unit for item in result} == {"ml", "g"}

    def test_unknown_units_are_not_merged(self, recipe_factory):
        """Test incompatible unrecognized units remain separate entries."""
        recipes = {"a": recipe_factory("a", ("Caffè", 1, "tazzina"), ("Caffè", 2, "mug"))}
        result = aggregate_shopping_list(["a"], recipes)
        assert sorted((item.unit, item.amount) for item in result) == [
            ("mug", 2),
            ("tazzina", 1),
        ]

    def test_zero_amount_is_not_to_taste(self, recipe_factory):
        """Test amount 0 with a normal unit aggregates normally."""
        recipes = {"a": recipe_factory("a", ("Burro", 0, "g"))}
        assert aggregate_shopping_list(["a"], recipes) == [
            ShoppingItem(name="Burro", amount=0, unit="g")
        ]

    def test_to_taste_and_quantified_same_name(self, recipe_factory):
        """Test a to-taste entry does not swallow a quantified one."""
        recipes = {
            "a": recipe_factory("a", ("Sale", 0, "to taste")),
            "b": recipe_factory("b", ("Sale", 10, "g")),
        }
        result = aggregate_shopping_list(["a", "b"], recipes)
        assert ShoppingItem(name="Sale", amount=10, unit="g") in result
        assert ShoppingItem(name="Sale", amount=0, unit=TO_TASTE) in result
        assert len(result) == 2

    def test_sorted_by_name(self, recipe_factory):
        """Test case- and accent-insensitive ordering by name."""
        recipes = {
            "a": recipe_factory(
                "a",
                ("Zucchine", 2, "pcs"),
                ("burro", 50, "g"),
                ("Óregano", 0, "to taste"),
                ("Aglio", 1, "cloves"),
            )
        }
        names = [item.name for item in aggregate_shopping_list(["a"], recipes)]
        assert names == ["Aglio", "burro", "Óregano", "Zucchine"]

    def test_no_duplicate_merge_keys(self, recipes_by_id):
        """Test a realistic week has unique (name, unit) keys."""
        result = aggregate_shopping_list(
            ["carbonara", "pancakes", "besciamella", "carbonara"], recipes_by_id
        )
        keys = [(item.name.lower(), item.unit) for item in result]
        assert len(keys) == len(set(keys))

    def test_recipe_sources(self, recipes_by_id):
        """Test contributing recipe ids are recorded once each."""
        result = aggregate_shopping_list(["carbonara", "carbonara"], recipes_by_id)
        spaghetti = next(item for item in result if item.name == "Spaghetti")
        assert spaghetti.amount == 640
        assert spaghetti.recipe_ids == ["carbonara"]

    def test_accepts_mappings(self):
        """Test plain dict recipes and ingredients from a storage layer."""
        recipes = {
            "a": {"ingredients": [{"name": "Riso", "amount": 320, "unit": "g"}]},
            "b": {"ingredients": [{"name": "Riso", "amount": "0,5", "unit": "kg"}]},
        }
        assert aggregate_shopping_list(["a", "b"], recipes) == [
            ShoppingItem(name="Riso", amount=820, unit="g")
        ]

    def test_parsed_lines_end_to_end(self, recipe_factory):
        """Test parser output feeds the aggregator directly."""
        lines_a = ["Latte 500 ml", "Sale q.b.", "200 g di farina"]
        lines_b = ["Latte 1 l", "Sale q.b.", "Farina 1 kg"]
        recipes = {
            rid: recipe_factory(
                rid, *((p.name, p.amount, p.unit) for p in map(parse_ingredient_line, lines))
            )
            for rid, lines in (("a", lines_a), ("b", lines_b))
        }
        result = aggregate_shopping_list(["a", "b"], recipes)
        assert result == [
            ShoppingItem(name="farina", amount=1.2, unit="kg"),
            ShoppingItem(name="Latte", amount=1.5, unit="l"),
            ShoppingItem(name="Sale", amount=0, unit=TO_TASTE),
        ]


class TestShoppingItem:
    """Tests for ShoppingItem dataclass."""

    def test_display_decimal(self):
        assert ShoppingItem(name="Latte", amount=1.5, unit="l").display_quantity() == "1.5 l"

    def test_display_integer(self):
        assert ShoppingItem(name="Uova", amount=5.0, unit=PIECE).display_quantity() == "5 pcs"

    def test_display_to_taste(self):
        item = ShoppingItem(name="Sale", amount=0, unit=TO_TASTE)
        assert item.is_to_taste
        assert item.display_quantity() == "q.b."

    def test_equality_ignores_sources(self):
        """Test recipe_ids do not take part in equality."""
        a = ShoppingItem(name="Sale", amount=0, unit=TO_TASTE, recipe_ids=["x"])
        b = ShoppingItem(name="Sale", amount=0, unit=TO_TASTE)
        assert a == b


# =============================================================================
# Weekly Planner Tests
# =============================================================================


class TestWeekDates:
    """Tests for week_dates function."""

    def test_seven_days_from_string(self):
        dates = week_dates("2026-10-19")
        assert len(dates) == 7
        assert dates[0] == "2026-10-19"
        assert dates[-1] == "2026-10-25"

    def test_crosses_month(self):
        assert week_dates(date(2026, 10, 29))[-1] == "2026-11-04"

    def test_invalid_date_raises(self):
        with pytest.raises(ValueError):
            week_dates("not-a-date")


class TestPlannedRecipeIds:
    """Tests for planned_recipe_ids function."""

    def test_flattens_week_in_order(self, week_plans):
        """Test day then meal-type order, duplicates kept, other weeks ignored."""
        assert planned_recipe_ids(week_plans, "2026-10-19") == [
            "pancakes",
            "carbonara",
            "carbonara",
            "deleted-recipe",
        ]

    def test_empty_week(self, week_plans):
        assert planned_recipe_ids(week_plans, "2026-11-02") == []

    def test_accepts_mappings(self):
        plans = {"2026-10-20": {"meals": {"dinner": ["a"], "lunch": ["b"]}}}
        assert planned_recipe_ids(plans, "2026-10-19") == ["b", "a"]


class TestBuildWeeklyShoppingList:
    """Tests for build_weekly_shopping_list function."""

    def test_week(self, week_plans, recipes_by_id):
        """Test the weekly list aggregates every slot of the week."""
        shopping_list = build_weekly_shopping_list(week_plans, "2026-10-19", recipes_by_id)

        assert isinstance(shopping_list, ShoppingList)
        assert shopping_list.week_start == "2026-10-19"
        # deleted-recipe is missing and besciamella is planned next week
        assert shopping_list.recipe_count == 2

        by_name = {item.name: item for item in shopping_list.items}
        assert by_name["Spaghetti"] == ShoppingItem(name="Spaghetti", amount=640, unit="g")
        assert by_name["Milk"] == ShoppingItem(name="Milk", amount=500, unit="ml")
        assert by_name["Pepe nero"].is_to_taste
        assert "Latte" not in by_name
        assert shopping_list.item_count == len(shopping_list.items)

    def test_date_week_start(self, week_plans, recipes_by_id):
        shopping_list = build_weekly_shopping_list(week_plans, date(2026, 10, 19), recipes_by_id)
        assert shopping_list.week_start == "2026-10-19"

    def test_empty_plan(self, recipes_by_id):
        shopping_list = build_weekly_shopping_list({}, "2026-10-19", recipes_by_id)
        assert shopping_list.items == []
        assert shopping_list.recipe_count == 0

    def test_plan_objects(self, recipes_by_id):
        """Test MealPlan schema objects are read like mappings."""
        plans = {
            "2026-10-22": MealPlan(
                id="x", date="2026-10-22", meals=MealSlots(dinner=["besciamella"])
            )
        }
        shopping_list = build_weekly_shopping_list(plans, "2026-10-19", recipes_by_id)
        assert ShoppingItem(name="Latte", amount=1, unit="l") in shopping_list.items
