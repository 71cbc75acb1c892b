"""
core/scoring.py
────────────────────────────────────────────────────────────────────────
Multi-factor fit score for one menu item against one request.

    party size   0‥20    −4 per person outside [serves_min, serves_max]
    cook time    0‥15    −1 per 4 min over the cap (excess capped at 60)
    budget       0‥22    16 − 3·gap when affordable, else 16 − 6·gap ≥ 0
    spice        0‥12    −4 per step away from the requested level
    difficulty   0‥6     easy +6 · normal +3 · involved 0
    avoided      −12     only when an avoided ingredient slipped through

The sum is clamped to [0, 100]. Higher = better fit.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.constraints import contains_avoided
from core.models import (
    BUDGET_RANK,
    SPICE_RANK,
    Difficulty,
    MenuItem,
    RecommendRequest,
)

MAX_SCORE = 100.0
MAX_REASONS = 3

PEOPLE_BASE, PEOPLE_STEP = 20, 4
COOKING_BASE, COOKING_EXCESS_CAP = 15, 60
BUDGET_BASE, BUDGET_UNDER_STEP, BUDGET_OVER_STEP = 16, 3, 6
SPICE_BASE, SPICE_STEP = 12, 4
DIFFICULTY_BONUS = {Difficulty.easy: 6, Difficulty.normal: 3, Difficulty.involved: 0}
AVOID_PENALTY = 12


@dataclass(frozen=True)
class ScoreDetail:
    label: str
    value: float


@dataclass(frozen=True)
class ScoredMenu:
    menu: MenuItem
    score: float
    reasons: list[str] = field(default_factory=list)
    details: list[ScoreDetail] = field(default_factory=list)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _people_gap(menu: MenuItem, people: int) -> int:
    if people < menu.serves_min:
        return menu.serves_min - people
    if people > menu.serves_max:
        return people - menu.serves_max
    return 0


def score_menu(menu: MenuItem, request: RecommendRequest) -> ScoredMenu:
    reasons: list[str] = []
    details: list[ScoreDetail] = []
    score = 0.0

    # ── party size ───────────────────────────────────────────────
    gap = _people_gap(menu, request.people)
    people_fit = _clamp(PEOPLE_BASE - gap * PEOPLE_STEP, 0, PEOPLE_BASE)
    score += people_fit
    details.append(ScoreDetail("party size fit", people_fit))
    if gap == 0:
        reasons.append(f"Serves exactly a party of {request.people}")
    else:
        reasons.append("Closest serving size for your party")

    # ── cooking time ─────────────────────────────────────────────
    excess = _clamp(menu.cooking_minutes - request.cooking_minutes_max, 0, COOKING_EXCESS_CAP)
    cooking_fit = _clamp(COOKING_BASE - excess / 4, 0, COOKING_BASE)
    score += cooking_fit
    details.append(ScoreDetail("prep time fit", cooking_fit))
    if menu.cooking_minutes <= request.cooking_minutes_max:
        reasons.append(f"Ready in {menu.cooking_minutes} minutes")

    # ── budget ───────────────────────────────────────────────────
    budget_gap = BUDGET_RANK[menu.price_band] - BUDGET_RANK[request.budget]
    if budget_gap <= 0:
        budget_fit = float(BUDGET_BASE - budget_gap * BUDGET_UNDER_STEP)
        reasons.append("Fits your budget")
    else:
        budget_fit = _clamp(BUDGET_BASE - budget_gap * BUDGET_OVER_STEP, 0, BUDGET_BASE)
    score += budget_fit
    details.append(ScoreDetail("budget fit", budget_fit))

    # ── spice ────────────────────────────────────────────────────
    spice_gap = abs(SPICE_RANK[menu.spice] - SPICE_RANK[request.spice])
    spice_fit = _clamp(SPICE_BASE - spice_gap * SPICE_STEP, 0, SPICE_BASE)
    score += spice_fit
    details.append(ScoreDetail("spice fit", spice_fit))
    if spice_gap == 0:
        reasons.append("Matches your spice preference")

    # ── difficulty ───────────────────────────────────────────────
    bonus = DIFFICULTY_BONUS[menu.difficulty]
    score += bonus
    details.append(ScoreDetail("difficulty", bonus))
    if menu.difficulty == Difficulty.easy:
        reasons.append("Easy to make")

    # ── avoided ingredients (only reachable once relaxed) ────────
    if contains_avoided(menu.ingredients, request.avoid_ingredients):
        score -= AVOID_PENALTY
        details.append(ScoreDetail("avoided ingredient", -AVOID_PENALTY))

    return ScoredMenu(
        menu=menu,
        score=_clamp(score, 0, MAX_SCORE),
        reasons=reasons[:MAX_REASONS],
        details=details,
    )
