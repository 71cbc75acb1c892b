"""
core/recommendation.py
────────────────────────────────────────────────────────────────────────
One request → one recommendation, combining:

  • quota state   → may we recommend again today?
  • relaxation    → strict → lenient stages until something matches
  • scoring       → ranked pick + alternatives

All public I/O happens through `recommend(...)`, which never raises for
the expected failure cases: they come back as an `OutcomeStatus` with
the state left untouched. Persisting the returned state and appending
the history entry is the caller's job.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from core.catalog import Catalog
from core.models import MAX_ATTEMPTS, DailyState, Recommendation, RecommendRequest
from core.quota import advance, date_key_for, is_exhausted, next_used_ids, resolve_state
from core.relaxation import RelaxStage, run_ladder

_LOG = logging.getLogger(__name__)

DEFAULT_ALTERNATIVES = 5


class OutcomeStatus(str, Enum):
    ok = "ok"
    quota_exhausted = "quota_exhausted"
    empty_catalog = "empty_catalog"
    no_candidates = "no_candidates"


MESSAGES: dict[OutcomeStatus, str] = {
    OutcomeStatus.ok: "Recommendation ready.",
    OutcomeStatus.quota_exhausted: "You have used all of today's recommendations.",
    OutcomeStatus.empty_catalog: "The menu catalog is empty, nothing to recommend.",
    OutcomeStatus.no_candidates: "No menu matches the selected meal time right now.",
}


@dataclass(frozen=True)
class RecommendOutcome:
    status: OutcomeStatus
    state: DailyState
    explanation: str
    recommendation: Recommendation | None = None
    stage: RelaxStage | None = None
    was_reset: bool = False

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.ok


def recommend(
    catalog: Catalog,
    request: RecommendRequest,
    state: DailyState | None,
    recent_ids: Iterable[str] = (),
    alt_count: int = DEFAULT_ALTERNATIVES,
    now: datetime | None = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> RecommendOutcome:
    now = now or datetime.now().astimezone()
    today = date_key_for(now)
    signature = request.signature

    base, was_reset = resolve_state(state, signature, today, max_attempts)
    if was_reset and state is not None:
        _LOG.info("stored state (%s, %s) superseded → starting fresh", state.date_key, state.signature)

    def _fail(status: OutcomeStatus, explanation: str | None = None) -> RecommendOutcome:
        return RecommendOutcome(
            status=status,
            state=base,
            explanation=explanation or MESSAGES[status],
            was_reset=was_reset,
        )

    if is_exhausted(base):
        _LOG.debug("quota exhausted (%d/%d)", base.attempt, base.max_attempts)
        return _fail(OutcomeStatus.quota_exhausted)

    if not catalog:
        _LOG.warning("recommend called with an empty catalog")
        return _fail(OutcomeStatus.empty_catalog)

    found = run_ladder(catalog, request, base.used_ids, recent_ids, alt_count)
    if found is None:
        _LOG.warning("no candidates for meal time %s at any stage", request.meal_time.value)
        return _fail(OutcomeStatus.no_candidates)

    picked = found.picked
    rec = Recommendation(
        date_key=today,
        picked=picked.menu,
        alternatives=[c.menu for c in found.alternatives],
        score=picked.score,
        reasons=list(picked.reasons),
        attempt=base.attempt + 1,
        used_ids=next_used_ids(base, picked.menu.id),
        signature=signature,
        created_at=now,
        request=request,
    )
    return RecommendOutcome(
        status=OutcomeStatus.ok,
        state=advance(base, rec),
        explanation=found.explanation,
        recommendation=rec,
        stage=found.stage,
        was_reset=was_reset,
    )
