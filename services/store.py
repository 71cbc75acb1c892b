"""
services/store.py
────────────────────────────────────────────────────────────────────────
* Key-value byte store contract used for persisted records
* In-memory implementation (tests, one-off CLI runs)
* Async SQLAlchemy v2 implementation backed by a single `kv_store` table
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from sqlalchemy import DateTime, LargeBinary, String, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

_LOG = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Backend could not read or write a key."""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes) -> None: ...

    async def delete(self, key: str) -> None: ...


# ───────── in-memory ─────────────────────────────────────────────────
class MemoryStore:
    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class KeyValue(Base):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


# ───────── SQL-backed store ──────────────────────────────────────────
class SqlStore:
    """Byte store on any async SQLAlchemy URL (sqlite+aiosqlite by default)."""

    def __init__(self, database_url: str) -> None:
        self._url = database_url
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    async def _session(self) -> AsyncSession:
        if self._sessions is None:
            try:
                self._engine = create_async_engine(self._url, pool_pre_ping=True)
                async with self._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except SQLAlchemyError as exc:
                if self._engine is not None:
                    await self._engine.dispose()
                    self._engine = None
                raise StoreError(f"cannot open store at {self._url}: {exc}") from exc
            self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)
            _LOG.debug("kv store ready at %s", self._url)
        return self._sessions()

    async def get(self, key: str) -> bytes | None:
        try:
            async with await self._session() as db:
                row = (
                    await db.execute(select(KeyValue.value).where(KeyValue.key == key))
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"read {key!r} failed: {exc}") from exc
        return row

    async def set(self, key: str, value: bytes) -> None:
        try:
            async with await self._session() as db:
                row = await db.get(KeyValue, key)
                if row is None:
                    db.add(KeyValue(key=key, value=value))
                else:
                    row.value = value
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"write {key!r} failed: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            async with await self._session() as db:
                await db.execute(delete(KeyValue).where(KeyValue.key == key))
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"delete {key!r} failed: {exc}") from exc

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessions = None
