from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, Field

from .menu import MealTime, MenuItem
from .request import RecommendRequest

SCHEMA_VERSION = 1
MAX_ATTEMPTS = 4


class Recommendation(BaseModel):
    date_key: str
    picked: MenuItem
    alternatives: list[MenuItem] = []
    score: float
    reasons: list[str] = []
    attempt: int
    used_ids: list[str] = []
    signature: str
    created_at: datetime
    request: RecommendRequest


class DailyState(BaseModel):
    """Quota record for one (day, request signature) pair."""

    schema_version: int = SCHEMA_VERSION
    date_key: str
    attempt: int = Field(0, ge=0)
    max_attempts: int = Field(MAX_ATTEMPTS, ge=1)
    signature: str
    used_ids: list[str] = []
    recommendation: Recommendation | None = None


class HistoryEntry(BaseModel):
    id: str
    date_key: str
    meal_time: MealTime
    people: int
    menu_name: str
    score: float
    reasons: list[str] = []
    created_at: datetime
    attempt: int
