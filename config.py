"""
Centralised settings loader.

Every value can be overridden with a `MENU_TODAY_`-prefixed environment
variable or an entry in `.env`.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / storage ───────────────────────────────────────────
    env_name: str = "local"
    database_url: str = "sqlite+aiosqlite:///./menu_today.db"
    catalog_path: str | None = None     # None → bundled core/data catalog
    log_level: str = "INFO"

    # ─── recommendation limits ──────────────────────────────────────
    max_attempts: int = Field(4, ge=1)
    alternatives: int = Field(5, ge=0)
    recency_days: int = Field(7, ge=0)

    # ─── persisted list caps ────────────────────────────────────────
    history_max: int = Field(80, ge=1)
    favorites_max: int = Field(40, ge=1)

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        env_prefix="MENU_TODAY_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )


Settings = _Settings


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
