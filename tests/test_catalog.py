# tests/test_catalog.py
from __future__ import annotations

import json

import pytest

from core.catalog import Catalog, load_default_catalog
from core.models import MealTime

RECORD = dict(
    id="toast", name="Toast", cuisine="western", meal_times=["breakfast"], spice="mild",
    cooking_minutes=5, serves_min=1, serves_max=1, price_band="low", difficulty="easy",
)


def test_bundled_catalog_covers_every_meal_time():
    catalog = load_default_catalog()
    assert len(catalog) >= 20
    for slot in MealTime:
        assert any(slot in m.meal_times for m in catalog), slot


def test_lookups():
    catalog = Catalog.from_records([RECORD])
    assert catalog.by_id("toast").name == "Toast"
    assert catalog.by_name("Toast").id == "toast"
    assert catalog.by_id("nope") is None
    assert bool(catalog) and not bool(Catalog([]))


def test_duplicate_ids_are_rejected():
    with pytest.raises(ValueError):
        Catalog.from_records([RECORD, {**RECORD, "name": "Other"}])


def test_from_json_requires_a_list(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps({"items": [RECORD]}))
    with pytest.raises(ValueError):
        Catalog.from_json(path)

    path.write_text(json.dumps([RECORD]))
    assert len(Catalog.from_json(path)) == 1


def test_to_frame():
    df = load_default_catalog().to_frame()
    assert {"id", "name", "cuisine", "meal_times"} <= set(df.columns)
    assert df["id"].is_unique
