# tests/test_history.py
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from core.catalog import Catalog
from core.models import HistoryEntry, MenuItem
from core.recency import recent_menu_ids
from core.stats import UNKNOWN_LABEL, overview

NOW = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)


def _menu(id: str, name: str, cuisine: str) -> MenuItem:
    return MenuItem(
        id=id, name=name, cuisine=cuisine, meal_times=["lunch", "dinner"], spice="mild",
        cooking_minutes=15, serves_min=1, serves_max=4, price_band="low", difficulty="easy",
    )


CATALOG = Catalog([
    _menu("bibimbap", "Bibimbap", "korean"),
    _menu("udon", "Udon", "japanese"),
    _menu("pasta", "Pasta", "western"),
])


def _entry(name: str, age: timedelta, meal_time="lunch", people=2, score=60.0) -> HistoryEntry:
    at = NOW - age
    return HistoryEntry(
        id=f"{at:%Y-%m-%d}-{int(at.timestamp())}", date_key=f"{at:%Y-%m-%d}",
        meal_time=meal_time, people=people, menu_name=name, score=score,
        reasons=[], created_at=at, attempt=1,
    )


# ── recency ──────────────────────────────────────────────────────────
def test_recent_window_is_seven_days():
    history = [
        _entry("Bibimbap", timedelta(hours=3)),
        _entry("Udon", timedelta(days=6, hours=23)),
        _entry("Pasta", timedelta(days=7, minutes=1)),
    ]
    assert recent_menu_ids(history, CATALOG, NOW) == {"bibimbap", "udon"}
    assert recent_menu_ids(history, CATALOG, NOW, days=1) == {"bibimbap"}


def test_unknown_names_are_ignored():
    history = [_entry("Mystery Dish", timedelta(hours=1))]
    assert recent_menu_ids(history, CATALOG, NOW) == set()


def test_naive_timestamps_are_local_time():
    local_now = NOW.astimezone().replace(tzinfo=None)
    history = [
        _entry("Udon", timedelta(days=6, hours=23, minutes=59)),
        _entry("Pasta", timedelta(days=7, minutes=1)),
        _entry("Bibimbap", timedelta(days=1)).model_copy(
            update={"created_at": local_now - timedelta(days=1)}
        ),
    ]
    assert recent_menu_ids(history, CATALOG, local_now) == {"udon", "bibimbap"}


# ── overview ─────────────────────────────────────────────────────────
def test_overview_counts_and_averages():
    history = [
        _entry("Bibimbap", timedelta(hours=1), people=2, score=70),
        _entry("Udon", timedelta(hours=2), meal_time="dinner", people=4, score=50),
        _entry("Bibimbap", timedelta(days=1), people=3, score=60),
        _entry("Gone Dish", timedelta(days=2), meal_time="dinner", people=1, score=40),
    ]
    ov = overview(history, CATALOG)

    assert ov.total_count == 4
    assert math.isclose(ov.avg_people, 2.5)
    assert math.isclose(ov.avg_score, 55)
    assert [(c.label, c.count) for c in ov.top_cuisine] == [
        ("korean", 2), ("japanese", 1), (UNKNOWN_LABEL, 1),
    ]
    assert [(c.label, c.count) for c in ov.top_meal_time] == [("dinner", 2), ("lunch", 2)]


def test_overview_of_nothing():
    ov = overview([], CATALOG)
    assert ov.total_count == 0
    assert ov.top_cuisine == []
