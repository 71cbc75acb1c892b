"""Ids of menus shown within a trailing window, derived from the history feed."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

from core.catalog import Catalog
from core.models import HistoryEntry

_LOG = logging.getLogger(__name__)

RECENCY_DAYS = 7


def _aware(ts: datetime) -> datetime:
    # naive values are local wall-clock time
    return ts if ts.tzinfo is not None else ts.astimezone()


def recent_menu_ids(
    history: Iterable[HistoryEntry],
    catalog: Catalog,
    now: datetime,
    days: int = RECENCY_DAYS,
) -> set[str]:
    since = _aware(now) - timedelta(days=days)
    ids: set[str] = set()
    for entry in history:
        if _aware(entry.created_at) < since:
            continue
        menu = catalog.by_name(entry.menu_name)
        if menu is None:
            _LOG.debug("history entry %s names unknown menu %r", entry.id, entry.menu_name)
            continue
        ids.add(menu.id)
    return ids
