"""Models for persisted food log entries."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


class MealType(Enum):
    """Meals a food log entry can belong to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @classmethod
    def parse(cls, raw: str | None) -> "MealType":
        """Map free-form meal names to a meal type, defaulting to snack."""
        if raw is None:
            return cls.SNACK
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.SNACK


class FoodLogEntry(BaseModel):
    """Food eaten by the user, stored per calendar day."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    meal_type: MealType = MealType.SNACK
    logged_at: datetime
    serving_size: float = Field(default=1.0, gt=0.0)
    serving_unit: str = "serving"
    image_path: str | None = None

    @field_validator("meal_type", mode="before")
    @classmethod
    def _coerce_meal_type(cls, value: object) -> object:
        if isinstance(value, str):
            return MealType.parse(value)
        return value


class MacroTotals(BaseModel):
    """Summed macros adjusted for serving sizes."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
