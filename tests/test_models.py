# tests/test_models.py
from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.models import MenuItem, RecommendRequest, parse_avoid_ingredients

BASE = dict(
    meal_time="lunch",
    people=2,
    spice="normal",
    budget="normal",
    diet_type="any",
    cooking_minutes_max=30,
    avoid_ingredients=["garlic", "onion"],
)


# ── signature ────────────────────────────────────────────────────────
def test_signature_ignores_avoid_order():
    a = RecommendRequest(**BASE)
    b = RecommendRequest(**{**BASE, "avoid_ingredients": ["Onion", " garlic "]})
    assert a.signature == b.signature


@pytest.mark.parametrize(
    "field, value",
    [
        ("meal_time", "dinner"),
        ("people", 3),
        ("spice", "hot"),
        ("budget", "generous"),
        ("diet_type", "vegetarian"),
        ("cooking_minutes_max", 45),
        ("avoid_ingredients", ["garlic"]),
        ("cuisine", "korean"),
        ("avoid_ingredients", ["garlic,onion,leek"]),
    ],
)
def test_signature_changes_with_any_other_field(field, value):
    base = RecommendRequest(**BASE)
    changed = RecommendRequest(**{**BASE, field: value})
    assert base.signature != changed.signature


def test_comma_inside_a_list_item_splits_into_tokens():
    joined = RecommendRequest(meal_time="lunch", avoid_ingredients=["a,b"])
    split = RecommendRequest(meal_time="lunch", avoid_ingredients=["a", "b"])
    assert joined.avoid_ingredients == split.avoid_ingredients == ("a", "b")
    assert joined.signature == split.signature


def test_cuisine_case_does_not_change_signature():
    upper = RecommendRequest(meal_time="lunch", cuisine=" Korean ")
    lower = RecommendRequest(meal_time="lunch", cuisine="korean")
    assert upper.cuisine == "korean"
    assert upper.signature == lower.signature


def test_signature_layout():
    req = RecommendRequest(**BASE)
    assert req.signature == "lunch|2|normal|normal|any|30|garlic,onion|"


# ── normalisation ────────────────────────────────────────────────────
def test_people_and_minutes_are_clamped():
    req = RecommendRequest(meal_time="dinner", people=40, cooking_minutes_max=1)
    assert req.people == 12
    assert req.cooking_minutes_max == 5

    req = RecommendRequest(meal_time="dinner", people=0, cooking_minutes_max=999)
    assert req.people == 1
    assert req.cooking_minutes_max == 240


@pytest.mark.parametrize("people", [float("inf"), float("-inf"), float("nan"), None, "many"])
def test_unusable_people_falls_back_to_one(people):
    assert RecommendRequest(meal_time="lunch", people=people).people == 1


@pytest.mark.parametrize("minutes", [None, float("nan"), float("inf"), "soon"])
def test_unusable_minutes_fall_back_to_default(minutes):
    req = RecommendRequest(meal_time="lunch", cooking_minutes_max=minutes)
    assert req.cooking_minutes_max == 30


def test_avoid_ingredients_are_deduplicated():
    req = RecommendRequest(meal_time="lunch", avoid_ingredients="Pork, pork ,, shrimp")
    assert req.avoid_ingredients == ("pork", "shrimp")


def test_parse_avoid_ingredients():
    assert parse_avoid_ingredients(" Milk,, EGG , ") == ["milk", "egg"]
    assert parse_avoid_ingredients("") == []


def test_request_is_immutable():
    req = RecommendRequest(**BASE)
    with pytest.raises(ValidationError):
        req.people = 5  # type: ignore[misc]


# ── menu items ───────────────────────────────────────────────────────
def test_menu_item_rejects_inverted_serving_range():
    with pytest.raises(ValidationError):
        MenuItem(
            id="x", name="X", cuisine="korean", meal_times=["lunch"], spice="mild",
            cooking_minutes=10, serves_min=4, serves_max=2, price_band="low",
            difficulty="easy",
        )


def test_menu_item_needs_a_meal_time():
    with pytest.raises(ValidationError):
        MenuItem(
            id="x", name="X", cuisine="korean", meal_times=[], spice="mild",
            cooking_minutes=10, serves_min=1, serves_max=2, price_band="low",
            difficulty="easy",
        )
