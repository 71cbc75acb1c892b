"""
services/session.py
────────────────────────────────────────────────────────────────────────
Caller-side glue around the pure core:

  load state → derive recency set → core.recommend → persist → history

One `MenuSession` per device/user. State mutations are serialized with
an asyncio lock so two overlapping `recommend` calls cannot both spend
the same attempt.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from config import Settings, settings as default_settings
from core.catalog import Catalog
from core.models import DailyState, HistoryEntry, MenuItem, Recommendation, RecommendRequest
from core.quota import build_empty_state, date_key_for, resolve_state
from core.recency import recent_menu_ids
from core.recommendation import RecommendOutcome, recommend
from core.relaxation import PoolInfo, pool_info
from core.stats import HistoryOverview, overview
from services import persistence
from services.store import KeyValueStore

_LOG = logging.getLogger(__name__)


def history_entry_for(rec: Recommendation) -> HistoryEntry:
    millis = int(rec.created_at.timestamp() * 1000)
    return HistoryEntry(
        id=f"{rec.date_key}-{millis}",
        date_key=rec.date_key,
        meal_time=rec.request.meal_time,
        people=rec.request.people,
        menu_name=rec.picked.name,
        score=rec.score,
        reasons=list(rec.reasons),
        created_at=rec.created_at,
        attempt=rec.attempt,
    )


class MenuSession:
    def __init__(
        self,
        catalog: Catalog,
        store: KeyValueStore,
        config: Settings | None = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._cfg = config or default_settings
        self._lock = asyncio.Lock()

    @staticmethod
    def _now(now: datetime | None) -> datetime:
        return now or datetime.now().astimezone()

    # ─────────────────────────── quota state ─────────────────────── #
    async def load_state(
        self, request: RecommendRequest, now: datetime | None = None
    ) -> tuple[DailyState, bool]:
        """Current state for `request`; a stale one is replaced and saved."""
        now = self._now(now)
        async with self._lock:
            stored = await persistence.load_today_state(self._store)
            state, was_reset = resolve_state(
                stored, request.signature, date_key_for(now), self._cfg.max_attempts
            )
            if was_reset:
                await persistence.save_today_state(self._store, state)
        return state, was_reset

    async def reset(self, request: RecommendRequest, now: datetime | None = None) -> DailyState:
        now = self._now(now)
        state = build_empty_state(request.signature, date_key_for(now), self._cfg.max_attempts)
        async with self._lock:
            await persistence.save_today_state(self._store, state)
        _LOG.info("daily state reset for %s", request.signature)
        return state

    # ─────────────────────────── recommend ───────────────────────── #
    async def _recent_ids(self, now: datetime) -> set[str]:
        if self._cfg.recency_days <= 0:
            return set()
        history = await persistence.load_history(self._store)
        return recent_menu_ids(history, self._catalog, now, self._cfg.recency_days)

    async def recommend(
        self, request: RecommendRequest, now: datetime | None = None
    ) -> RecommendOutcome:
        now = self._now(now)
        async with self._lock:
            stored = await persistence.load_today_state(self._store)
            recent = await self._recent_ids(now)
            outcome = recommend(
                self._catalog,
                request,
                stored,
                recent_ids=recent,
                alt_count=self._cfg.alternatives,
                now=now,
                max_attempts=self._cfg.max_attempts,
            )

            if outcome.ok and outcome.recommendation is not None:
                if await persistence.save_today_state(self._store, outcome.state):
                    await persistence.append_history(
                        self._store,
                        history_entry_for(outcome.recommendation),
                        self._cfg.history_max,
                    )
                else:
                    _LOG.warning(
                        "attempt %d not recorded; history left unchanged",
                        outcome.state.attempt,
                    )
            elif outcome.was_reset:
                await persistence.save_today_state(self._store, outcome.state)

        _LOG.info(
            "recommend %s → %s (attempt %d/%d)",
            request.meal_time.value,
            outcome.status.value,
            outcome.state.attempt,
            outcome.state.max_attempts,
        )
        return outcome

    async def pool_info(self, request: RecommendRequest, now: datetime | None = None) -> PoolInfo:
        now = self._now(now)
        stored = await persistence.load_today_state(self._store)
        state, _ = resolve_state(stored, request.signature, date_key_for(now), self._cfg.max_attempts)
        return pool_info(self._catalog, request, state.used_ids, await self._recent_ids(now))

    # ─────────────────────────── favorites ───────────────────────── #
    async def toggle_favorite(self, menu_id: str) -> list[str]:
        if self._catalog.by_id(menu_id) is None:
            raise KeyError(f"unknown menu id: {menu_id}")
        async with self._lock:
            current = await persistence.load_favorite_ids(self._store)
            if menu_id in current:
                nxt = [i for i in current if i != menu_id]
            else:
                nxt = [*current, menu_id]
            return await persistence.save_favorite_ids(self._store, nxt, self._cfg.favorites_max)

    async def favorite_menus(self) -> list[MenuItem]:
        ids = set(await persistence.load_favorite_ids(self._store))
        return [menu for menu in self._catalog if menu.id in ids]

    # ─────────────────────────── history ─────────────────────────── #
    async def history(self) -> list[HistoryEntry]:
        return await persistence.load_history(self._store)

    async def clear_history(self) -> bool:
        return await persistence.clear_history(self._store)

    async def overview(self) -> HistoryOverview:
        return overview(await self.history(), self._catalog)

    async def device_id(self) -> str:
        return await persistence.get_or_create_device_id(self._store)
