from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from .menu import BudgetLevel, DietType, MealTime, SpiceLevel

PEOPLE_MIN, PEOPLE_MAX = 1, 12
COOKING_MINUTES_MIN, COOKING_MINUTES_MAX = 5, 240
COOKING_MINUTES_DEFAULT = 30


def parse_avoid_ingredients(text: str) -> list[str]:
    """Split free-form "onion, Garlic ,," input into clean lower-case tokens."""
    return [part.strip().lower() for part in text.split(",") if part.strip()]


class RecommendRequest(BaseModel):
    """One user's preferences for a single recommendation call."""

    meal_time: MealTime
    people: int = 2
    spice: SpiceLevel = SpiceLevel.normal
    budget: BudgetLevel = BudgetLevel.normal
    diet_type: DietType = DietType.any
    cooking_minutes_max: int = COOKING_MINUTES_DEFAULT
    avoid_ingredients: tuple[str, ...] = ()
    cuisine: str | None = None   # optional cuisine filter

    model_config = ConfigDict(frozen=True)

    @field_validator("people", mode="before")
    @classmethod
    def _clamp_people(cls, v: object) -> int:
        try:
            people = round(float(v))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            people = PEOPLE_MIN   # None, NaN, ±inf
        return min(max(people, PEOPLE_MIN), PEOPLE_MAX)

    @field_validator("cooking_minutes_max", mode="before")
    @classmethod
    def _clamp_minutes(cls, v: object) -> int:
        try:
            minutes = round(float(v))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            minutes = COOKING_MINUTES_DEFAULT
        return min(max(minutes, COOKING_MINUTES_MIN), COOKING_MINUTES_MAX)

    @field_validator("avoid_ingredients", mode="before")
    @classmethod
    def _normalise_avoid(cls, v: object) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        seen: dict[str, None] = {}
        for item in v:  # type: ignore[union-attr]
            for token in parse_avoid_ingredients(str(item)):
                seen.setdefault(token, None)
        return tuple(seen)

    @field_validator("cuisine", mode="before")
    @classmethod
    def _blank_cuisine(cls, v: object) -> str | None:
        if v is None or not str(v).strip():
            return None
        return str(v).strip().lower()

    @property
    def signature(self) -> str:
        """
        Canonical encoding of every field.

        The avoid list is sorted first so that input order never matters;
        any other change yields a different string.
        """
        avoid = ",".join(sorted(self.avoid_ingredients))
        return "|".join(
            str(part)
            for part in (
                self.meal_time.value,
                self.people,
                self.spice.value,
                self.budget.value,
                self.diet_type.value,
                self.cooking_minutes_max,
                avoid,
                self.cuisine or "",
            )
        )
