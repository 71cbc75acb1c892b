from __future__ import annotations
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MealTime(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    late_night = "late_night"


class SpiceLevel(str, Enum):
    mild = "mild"
    normal = "normal"
    hot = "hot"
    extra_hot = "extra_hot"


class BudgetLevel(str, Enum):
    low = "low"
    normal = "normal"
    generous = "generous"


class DietType(str, Enum):
    any = "any"
    vegetarian = "vegetarian"
    high_protein = "high_protein"
    low_carb = "low_carb"
    low_calorie = "low_calorie"


class Difficulty(str, Enum):
    easy = "easy"
    normal = "normal"
    involved = "involved"


# ordinal position, low → high
SPICE_RANK: dict[SpiceLevel, int] = {
    SpiceLevel.mild: 0,
    SpiceLevel.normal: 1,
    SpiceLevel.hot: 2,
    SpiceLevel.extra_hot: 3,
}

BUDGET_RANK: dict[BudgetLevel, int] = {
    BudgetLevel.low: 0,
    BudgetLevel.normal: 1,
    BudgetLevel.generous: 2,
}


class MenuItem(BaseModel):
    id: str
    name: str
    description: str = ""
    cuisine: str
    meal_times: list[MealTime] = Field(..., min_length=1)
    spice: SpiceLevel
    cooking_minutes: int = Field(..., ge=0)
    serves_min: int = Field(..., ge=1)
    serves_max: int = Field(..., ge=1)
    price_band: BudgetLevel
    difficulty: Difficulty
    tags: list[str] = []
    diet_types: list[DietType] = []
    ingredients: list[str] = []
    kcal: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_serving_range(self) -> "MenuItem":
        if self.serves_min > self.serves_max:
            raise ValueError(
                f"serves_min ({self.serves_min}) exceeds serves_max ({self.serves_max})"
            )
        return self
