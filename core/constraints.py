"""
core/constraints.py
────────────────────────────────────────────────────────────────────────
Eligibility rules for a single menu item.

The meal-time rule is hard and can never be switched off. Every other
rule has a matching flag in `RelaxFlags`; a set flag means "treat this
rule as satisfied".
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from core.models import BUDGET_RANK, DietType, MenuItem, RecommendRequest


# ──────────────────────────────────────────────────────────────────────
#  Relaxation flags
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class RelaxFlags:
    people: bool = False
    cooking_minutes: bool = False
    budget: bool = False
    diet_type: bool = False
    spice: bool = False
    avoid_ingredients: bool = False
    cuisine: bool = False

    def plus(self, **flags: bool) -> "RelaxFlags":
        return replace(self, **flags)


STRICT = RelaxFlags()


def contains_avoided(ingredients: Iterable[str], avoid: Iterable[str]) -> bool:
    """True if any ingredient contains any avoided token (case-insensitive)."""
    tokens = [a.lower() for a in avoid if a]
    if not tokens:
        return False
    return any(tok in ing.lower() for ing in ingredients for tok in tokens)


def is_allowed(menu: MenuItem, request: RecommendRequest, relax: RelaxFlags = STRICT) -> bool:
    if request.meal_time not in menu.meal_times:
        return False

    if not relax.people and not (menu.serves_min <= request.people <= menu.serves_max):
        return False

    if not relax.cooking_minutes and menu.cooking_minutes > request.cooking_minutes_max:
        return False

    if not relax.budget and BUDGET_RANK[menu.price_band] > BUDGET_RANK[request.budget]:
        return False

    if (
        not relax.diet_type
        and request.diet_type != DietType.any
        and request.diet_type not in menu.diet_types
    ):
        return False

    if not relax.spice and menu.spice != request.spice:
        return False

    if not relax.avoid_ingredients and contains_avoided(menu.ingredients, request.avoid_ingredients):
        return False

    if (
        not relax.cuisine
        and request.cuisine is not None
        and menu.cuisine.lower() != request.cuisine.lower()
    ):
        return False

    return True
