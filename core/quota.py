"""
core/quota.py
────────────────────────────────────────────────────────────────────────
Per-(day, request signature) quota record.

    EMPTY ──recommend──▶ ACTIVE(1) ──▶ … ──▶ ACTIVE(max) = EXHAUSTED
      ▲                                              │
      └──── date rollover · signature change · reset ┘

States are pydantic models and are never mutated in place: every
transition returns a new instance.
"""

from __future__ import annotations

from datetime import datetime

from core.models import MAX_ATTEMPTS, SCHEMA_VERSION, DailyState, Recommendation


def date_key_for(now: datetime) -> str:
    """Calendar day of `now` in its own timezone, e.g. 2026-10-18."""
    return now.strftime("%Y-%m-%d")


def build_empty_state(signature: str, date_key: str, max_attempts: int = MAX_ATTEMPTS) -> DailyState:
    return DailyState(
        schema_version=SCHEMA_VERSION,
        date_key=date_key,
        attempt=0,
        max_attempts=max_attempts,
        signature=signature,
        used_ids=[],
    )


def is_current(state: DailyState | None, signature: str, date_key: str) -> bool:
    return state is not None and state.date_key == date_key and state.signature == signature


def resolve_state(
    stored: DailyState | None,
    signature: str,
    date_key: str,
    max_attempts: int = MAX_ATTEMPTS,
) -> tuple[DailyState, bool]:
    """
    Return the state to work with and whether it had to be reset.

    A stored state only survives when both the date key and the request
    signature match; anything else starts over from EMPTY.
    """
    if stored is not None and is_current(stored, signature, date_key):
        return stored, False
    return build_empty_state(signature, date_key, max_attempts), True


def reset_state(state: DailyState) -> DailyState:
    """Explicit reset: same signature and day, progress discarded."""
    return build_empty_state(state.signature, state.date_key, state.max_attempts)


def remaining_attempts(state: DailyState) -> int:
    return max(state.max_attempts - state.attempt, 0)


def is_exhausted(state: DailyState) -> bool:
    return state.attempt >= state.max_attempts


def advance(state: DailyState, recommendation: Recommendation) -> DailyState:
    if is_exhausted(state):
        raise ValueError(
            f"quota exhausted ({state.attempt}/{state.max_attempts}) – cannot advance"
        )
    if recommendation.attempt != state.attempt + 1:
        raise ValueError(
            f"recommendation attempt {recommendation.attempt} does not follow {state.attempt}"
        )
    return state.model_copy(
        update={
            "attempt": recommendation.attempt,
            "used_ids": next_used_ids(state, recommendation.picked.id),
            "recommendation": recommendation,
        }
    )


def next_used_ids(state: DailyState, picked_id: str) -> list[str]:
    """Picked id first, then the earlier ones, without duplicates."""
    return list(dict.fromkeys([picked_id, *state.used_ids]))
