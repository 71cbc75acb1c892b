"""
core/catalog.py
────────────────────────────────────────────────────────────────────────
Immutable, in-memory menu catalogue.

The catalogue is loaded once (bundled JSON or a caller-supplied file) and
then only read: every recommendation call receives it explicitly.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

import pandas as pd
from pydantic import TypeAdapter

from core.models import MenuItem

_LOG = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "menu_catalog.json"

_ITEMS = TypeAdapter(list[MenuItem])


class Catalog:
    def __init__(self, items: Iterable[MenuItem]) -> None:
        self._items: tuple[MenuItem, ...] = tuple(items)
        self._by_id: dict[str, MenuItem] = {}
        self._by_name: dict[str, MenuItem] = {}
        for item in self._items:
            if item.id in self._by_id:
                raise ValueError(f"duplicate menu id in catalog: {item.id!r}")
            self._by_id[item.id] = item
            self._by_name.setdefault(item.name, item)

    # ─────────────────────────────── loaders ──────────────────────── #
    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> "Catalog":
        return cls(_ITEMS.validate_python(records))

    @classmethod
    def from_json(cls, path: str | Path) -> "Catalog":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("catalog JSON must contain a list of menu dictionaries")
        catalog = cls.from_records(data)
        _LOG.debug("loaded %d menu items from %s", len(catalog), path)
        return catalog

    # ─────────────────────────────── lookups ──────────────────────── #
    @property
    def items(self) -> tuple[MenuItem, ...]:
        return self._items

    def by_id(self, menu_id: str) -> MenuItem | None:
        return self._by_id.get(menu_id)

    def by_name(self, name: str) -> MenuItem | None:
        return self._by_name.get(name)

    def to_frame(self) -> pd.DataFrame:
        """Flat DataFrame view (one row per item, list columns kept as lists)."""
        return pd.DataFrame(
            [item.model_dump(mode="json") for item in self._items],
            columns=list(MenuItem.model_fields),
        )

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


def load_default_catalog(path: str | Path | None = None) -> Catalog:
    return Catalog.from_json(path or DEFAULT_CATALOG_PATH)
