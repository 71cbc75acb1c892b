"""
services/persistence.py
────────────────────────────────────────────────────────────────────────
Versioned JSON records on top of a `KeyValueStore`.

Reads never fail: a missing key, a backend `StoreError` or a payload
that does not parse all come back as "absent" (None / empty list).
Writes report success as a bool and log the failure.
"""
from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from pydantic import TypeAdapter, ValidationError

from core.models import MAX_ATTEMPTS, SCHEMA_VERSION, DailyState, HistoryEntry
from services.store import KeyValueStore, StoreError

_LOG = logging.getLogger(__name__)

DEVICE_ID_KEY = "menu-today-device-id"
TODAY_KEY = "menu-today-today-state"
HISTORY_KEY = "menu-today-history"
FAVORITES_KEY = "menu-today-favorites"

HISTORY_MAX = 80
FAVORITES_MAX = 40

_HISTORY = TypeAdapter(list[HistoryEntry])
_IDS = TypeAdapter(list[str])


# ───────────────────────── raw helpers ──────────────────────
async def _read(store: KeyValueStore, key: str) -> bytes | None:
    try:
        return await store.get(key)
    except StoreError as exc:
        _LOG.warning("store read %s failed, treating as absent: %s", key, exc)
        return None


async def _write(store: KeyValueStore, key: str, payload: bytes) -> bool:
    try:
        await store.set(key, payload)
    except StoreError as exc:
        _LOG.error("store write %s failed: %s", key, exc)
        return False
    return True


async def _remove(store: KeyValueStore, key: str) -> bool:
    try:
        await store.delete(key)
    except StoreError as exc:
        _LOG.error("store delete %s failed: %s", key, exc)
        return False
    return True


def _parse_json(raw: bytes | None, key: str) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        _LOG.warning("corrupt payload under %s, ignoring", key)
        return None


# ───────────────────────── device id ────────────────────────
async def get_or_create_device_id(store: KeyValueStore) -> str:
    raw = await _read(store, DEVICE_ID_KEY)
    if raw:
        return raw.decode("utf-8", errors="replace")
    device_id = str(uuid.uuid4())
    await _write(store, DEVICE_ID_KEY, device_id.encode("utf-8"))
    return device_id


# ───────────────────────── today state ──────────────────────
def migrate_daily_state(raw: dict[str, Any] | None) -> tuple[DailyState | None, bool]:
    """
    Upgrade an older stored record to the current schema.

    Returns (state, migrated). Missing fields get their documented
    defaults: attempt=0, max_attempts=4, used_ids=[]. A record that
    still does not validate is treated as absent.
    """
    if not isinstance(raw, dict):
        return None, False

    migrated = raw.get("schema_version") != SCHEMA_VERSION
    if migrated:
        raw = {
            **raw,
            "schema_version": SCHEMA_VERSION,
            "attempt": raw.get("attempt") or 0,
            "max_attempts": raw.get("max_attempts") or MAX_ATTEMPTS,
            "used_ids": raw.get("used_ids") or [],
        }
    try:
        return DailyState.model_validate(raw), migrated
    except ValidationError as exc:
        _LOG.warning("stored daily state unusable (%d errors), ignoring", exc.error_count())
        return None, False


async def load_today_state(store: KeyValueStore) -> DailyState | None:
    state, migrated = migrate_daily_state(_parse_json(await _read(store, TODAY_KEY), TODAY_KEY))
    if migrated:
        _LOG.info("migrated stored daily state to schema v%d", SCHEMA_VERSION)
    return state


async def save_today_state(store: KeyValueStore, state: DailyState | None) -> bool:
    if state is None:
        return await _remove(store, TODAY_KEY)
    return await _write(store, TODAY_KEY, state.model_dump_json().encode("utf-8"))


# ───────────────────────── history ──────────────────────────
async def load_history(store: KeyValueStore) -> list[HistoryEntry]:
    data = _parse_json(await _read(store, HISTORY_KEY), HISTORY_KEY)
    if data is None:
        return []
    try:
        return _HISTORY.validate_python(data)
    except ValidationError:
        _LOG.warning("stored history unusable, starting empty")
        return []


async def append_history(
    store: KeyValueStore, entry: HistoryEntry, limit: int = HISTORY_MAX
) -> list[HistoryEntry]:
    """Prepend `entry` (newest first) and evict the oldest beyond `limit`."""
    history = [entry, *await load_history(store)][:limit]
    await _write(store, HISTORY_KEY, _HISTORY.dump_json(history))
    return history


async def clear_history(store: KeyValueStore) -> bool:
    return await _remove(store, HISTORY_KEY)


# ───────────────────────── favorites ────────────────────────
def normalise_favorites(ids: list[str], limit: int = FAVORITES_MAX) -> list[str]:
    """De-duplicate keeping first occurrence, then keep the first `limit`."""
    return list(dict.fromkeys(ids))[:limit]


async def load_favorite_ids(store: KeyValueStore) -> list[str]:
    data = _parse_json(await _read(store, FAVORITES_KEY), FAVORITES_KEY)
    if data is None:
        return []
    try:
        return _IDS.validate_python(data)
    except ValidationError:
        _LOG.warning("stored favorites unusable, starting empty")
        return []


async def save_favorite_ids(
    store: KeyValueStore, ids: list[str], limit: int = FAVORITES_MAX
) -> list[str]:
    kept = normalise_favorites(ids, limit)
    await _write(store, FAVORITES_KEY, _IDS.dump_json(kept))
    return kept
