"""
core/relaxation.py
────────────────────────────────────────────────────────────────────────
Staged constraint relaxation.

`RELAX_STAGES` lists the stages from strict to most lenient. The ladder
stops at the first stage whose eligible set is non-empty, so a request
only loses constraints when nothing satisfies the stricter ones.

Inside a stage the pool is narrowed by exclusion sets, most selective
first:

    used today ∪ recent  →  used today  →  whole stage set

Only the last stage drops the exclusions outright (`allow_used`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from core.catalog import Catalog
from core.constraints import STRICT, RelaxFlags, is_allowed
from core.models import RecommendRequest
from core.scoring import ScoredMenu, score_menu

_LOG = logging.getLogger(__name__)

REPEAT_NOTE = "Today's fresh options are used up, so earlier picks may repeat"


@dataclass(frozen=True)
class RelaxStage:
    key: str
    label: str
    relax: RelaxFlags
    allow_used: bool = False


_AVOID = STRICT.plus(avoid_ingredients=True)
_PEOPLE_TIME = _AVOID.plus(people=True, cooking_minutes=True)
_MEAL_TIME_ONLY = _PEOPLE_TIME.plus(budget=True, diet_type=True, spice=True, cuisine=True)

RELAX_STAGES: tuple[RelaxStage, ...] = (
    RelaxStage("strict", "Recommended with every condition applied", STRICT),
    RelaxStage("avoid", "Relaxed the avoided-ingredient condition", _AVOID),
    RelaxStage("people_time", "Relaxed the party size and cooking time conditions", _PEOPLE_TIME),
    RelaxStage(
        "diet_budget_spice",
        "Relaxed the diet, budget, spice and cuisine conditions",
        _MEAL_TIME_ONLY,
    ),
    RelaxStage(
        "anything_goes",
        "Widest possible match for this meal time",
        _MEAL_TIME_ONLY,
        allow_used=True,
    ),
)


@dataclass(frozen=True)
class LadderResult:
    picked: ScoredMenu
    alternatives: list[ScoredMenu]
    stage: RelaxStage
    explanation: str
    repeats: bool = False


@dataclass(frozen=True)
class StagePool:
    """Candidate counts for one stage (read-only preview)."""

    key: str
    label: str
    total: int
    fresh: int           # not shown today
    fresh_not_recent: int


@dataclass(frozen=True)
class PoolInfo:
    stages: list[StagePool] = field(default_factory=list)
    active_stage: str | None = None


# ─────────────────────────────── ranking ──────────────────────────── #
def _rank_key(c: ScoredMenu) -> tuple:
    # longer breakdown first: an extra line only appears for the avoid penalty
    return (-c.score, -len(c.details), c.menu.cuisine, c.menu.name)


def rank_stage(catalog: Catalog, request: RecommendRequest, stage: RelaxStage) -> list[ScoredMenu]:
    scored = [
        score_menu(menu, request)
        for menu in catalog
        if is_allowed(menu, request, stage.relax)
    ]
    return sorted(scored, key=_rank_key)


def _narrow(
    ranked: list[ScoredMenu],
    stage: RelaxStage,
    used: set[str],
    recent: set[str],
) -> tuple[list[ScoredMenu], bool]:
    """Return (pool, repeats_allowed)."""
    if stage.allow_used:
        return ranked, bool(used)

    fresh = [c for c in ranked if c.menu.id not in used]
    if recent:
        not_recent = [c for c in fresh if c.menu.id not in recent]
        if not_recent:
            return not_recent, False
        _LOG.debug("stage %s: every fresh candidate is recent, ignoring recency", stage.key)
    if fresh:
        return fresh, False
    _LOG.debug("stage %s: every candidate was used today, allowing repeats", stage.key)
    return ranked, True


def _explain(stage: RelaxStage, repeats: bool) -> str:
    return f"{stage.label}. {REPEAT_NOTE}." if repeats else stage.label


# ─────────────────────────────── ladder ───────────────────────────── #
def run_ladder(
    catalog: Catalog,
    request: RecommendRequest,
    used_ids: Iterable[str] = (),
    recent_ids: Iterable[str] = (),
    alt_count: int = 5,
) -> LadderResult | None:
    """Walk the stages; None when even the last stage admits nothing."""
    used, recent = set(used_ids), set(recent_ids)

    for stage in RELAX_STAGES:
        ranked = rank_stage(catalog, request, stage)
        if not ranked:
            _LOG.debug("stage %s: no candidates", stage.key)
            continue

        pool, repeats = _narrow(ranked, stage, used, recent)
        picked = pool[0]
        alternatives = [
            c for c in pool[1:max(alt_count, 0) + 1] if c.menu.id != picked.menu.id
        ]
        _LOG.debug(
            "stage %s: picked %s (score=%.1f, pool=%d)",
            stage.key, picked.menu.id, picked.score, len(pool),
        )
        return LadderResult(
            picked=picked,
            alternatives=alternatives,
            stage=stage,
            explanation=_explain(stage, repeats),
            repeats=repeats,
        )

    return None


def pool_info(
    catalog: Catalog,
    request: RecommendRequest,
    used_ids: Iterable[str] = (),
    recent_ids: Iterable[str] = (),
) -> PoolInfo:
    """Per-stage candidate counts without picking anything."""
    used, recent = set(used_ids), set(recent_ids)
    stages: list[StagePool] = []
    active: str | None = None

    for stage in RELAX_STAGES:
        ids = [m.id for m in catalog if is_allowed(m, request, stage.relax)]
        fresh = ids if stage.allow_used else [i for i in ids if i not in used]
        not_recent = fresh if stage.allow_used else [i for i in fresh if i not in recent]
        stages.append(StagePool(stage.key, stage.label, len(ids), len(fresh), len(not_recent)))
        if active is None and ids:
            active = stage.key

    return PoolInfo(stages=stages, active_stage=active)
