# tests/test_scoring.py
from __future__ import annotations

import math

from core.models import MenuItem, RecommendRequest
from core.scoring import MAX_REASONS, score_menu


def _menu(**kw) -> MenuItem:
    base = dict(
        id="stew", name="Stew", cuisine="korean", meal_times=["lunch"], spice="normal",
        cooking_minutes=20, serves_min=2, serves_max=4, price_band="normal",
        difficulty="normal", ingredients=["tofu", "garlic"],
    )
    return MenuItem(**{**base, **kw})


def _req(**kw) -> RecommendRequest:
    base = dict(meal_time="lunch", people=2, spice="normal", budget="normal",
                diet_type="any", cooking_minutes_max=30)
    return RecommendRequest(**{**base, **kw})


def _detail(scored, label):
    return next(d.value for d in scored.details if d.label == label)


# ── totals ───────────────────────────────────────────────────────────
def test_perfect_fit_scores_each_factor_in_full():
    s = score_menu(_menu(), _req())
    # 20 party + 15 time + 16 budget + 12 spice + 3 difficulty
    assert math.isclose(s.score, 66)
    assert len(s.details) == 5


def test_easy_and_cheaper_menu_gets_bonuses():
    s = score_menu(_menu(difficulty="easy", price_band="low"), _req())
    assert math.isclose(_detail(s, "budget fit"), 19)
    assert math.isclose(s.score, 20 + 15 + 19 + 12 + 6)


def test_over_budget_penalty():
    s = score_menu(_menu(price_band="generous"), _req(budget="low"))
    assert math.isclose(_detail(s, "budget fit"), 4)


def test_party_size_penalty():
    s = score_menu(_menu(), _req(people=7))
    assert math.isclose(_detail(s, "party size fit"), 8)
    assert s.reasons[0] == "Closest serving size for your party"


def test_cooking_penalty_is_capped():
    assert math.isclose(_detail(score_menu(_menu(cooking_minutes=50), _req()), "prep time fit"), 10)
    assert math.isclose(_detail(score_menu(_menu(cooking_minutes=200), _req()), "prep time fit"), 0)


def test_spice_distance():
    s = score_menu(_menu(spice="extra_hot"), _req(spice="mild"))
    assert math.isclose(_detail(s, "spice fit"), 0)
    s = score_menu(_menu(spice="hot"), _req())
    assert math.isclose(_detail(s, "spice fit"), 8)


def test_avoided_ingredient_adds_penalty_line():
    clean = score_menu(_menu(), _req())
    dirty = score_menu(_menu(), _req(avoid_ingredients=["GARLIC"]))
    assert math.isclose(clean.score - dirty.score, 12)
    assert len(dirty.details) == len(clean.details) + 1
    assert dirty.details[-1].value == -12


def test_score_is_clamped_at_zero():
    menu = _menu(serves_min=8, serves_max=10, cooking_minutes=240, price_band="generous",
                 spice="extra_hot", difficulty="involved")
    s = score_menu(menu, _req(people=1, budget="low", spice="mild", avoid_ingredients=["tofu"]))
    assert s.score == 0


# ── reasons ──────────────────────────────────────────────────────────
def test_reasons_keep_evaluation_order_and_cap():
    s = score_menu(_menu(difficulty="easy"), _req())
    assert len(s.reasons) == MAX_REASONS
    assert s.reasons == [
        "Serves exactly a party of 2",
        "Ready in 20 minutes",
        "Fits your budget",
    ]


def test_scoring_is_deterministic():
    menu, req = _menu(), _req(avoid_ingredients=["garlic"])
    assert score_menu(menu, req) == score_menu(menu, req)
