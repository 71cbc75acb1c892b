"""Re-export individual model modules for easy imports."""

from .menu import (
    BUDGET_RANK,
    SPICE_RANK,
    BudgetLevel,
    DietType,
    Difficulty,
    MealTime,
    MenuItem,
    SpiceLevel,
)
from .request import RecommendRequest, parse_avoid_ingredients
from .state import (
    MAX_ATTEMPTS,
    SCHEMA_VERSION,
    DailyState,
    HistoryEntry,
    Recommendation,
)

__all__ = [
    "BUDGET_RANK",
    "SPICE_RANK",
    "BudgetLevel",
    "DietType",
    "Difficulty",
    "MealTime",
    "MenuItem",
    "SpiceLevel",
    "RecommendRequest",
    "parse_avoid_ingredients",
    "MAX_ATTEMPTS",
    "SCHEMA_VERSION",
    "DailyState",
    "HistoryEntry",
    "Recommendation",
]
