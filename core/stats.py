"""
core/stats.py
────────────────────────────────────────────────────────────────────────
Aggregate view over the recommendation history: how many picks, average
party size and score, and the most frequent cuisines / meal times.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd

from core.catalog import Catalog
from core.models import HistoryEntry

TOP_N = 4
UNKNOWN_LABEL = "other"


@dataclass(frozen=True)
class LabelCount:
    label: str
    count: int


@dataclass(frozen=True)
class HistoryOverview:
    total_count: int = 0
    avg_people: float = 0.0
    avg_score: float = 0.0
    top_cuisine: list[LabelCount] = field(default_factory=list)
    top_meal_time: list[LabelCount] = field(default_factory=list)


def _top_by_count(values: pd.Series, n: int = TOP_N) -> list[LabelCount]:
    labels = values.fillna("").astype(str).str.strip().replace("", UNKNOWN_LABEL)
    counts = labels.value_counts()
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:n]
    return [LabelCount(str(label), int(count)) for label, count in ranked]


def overview(history: Iterable[HistoryEntry], catalog: Catalog) -> HistoryOverview:
    rows = [entry.model_dump(mode="json") for entry in history]
    if not rows:
        return HistoryOverview()

    df = pd.DataFrame(rows)
    menus = catalog.to_frame()
    cuisine_by_name = menus.drop_duplicates("name").set_index("name")["cuisine"]
    df["cuisine"] = df["menu_name"].map(cuisine_by_name)

    return HistoryOverview(
        total_count=len(df),
        avg_people=float(df["people"].mean()),
        avg_score=float(df["score"].mean()),
        top_cuisine=_top_by_count(df["cuisine"]),
        top_meal_time=_top_by_count(df["meal_time"]),
    )
