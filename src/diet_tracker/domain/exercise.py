"""Models for logged exercise sessions."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


class ExerciseLevel(Enum):
    """Intensity of an exercise session."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ExerciseLog(BaseModel):
    """A completed exercise session."""

    id: UUID = Field(default_factory=uuid4)
    exercise_id: str = Field(min_length=1)
    logged_at: datetime
    duration_minutes: int = Field(ge=0)
    calories_burned: int = Field(ge=0)
    intensity: ExerciseLevel = ExerciseLevel.BEGINNER
    notes: str | None = None
    user_weight_kg: float | None = Field(default=None, gt=0.0)

    @field_validator("intensity", mode="before")
    @classmethod
    def _coerce_intensity(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return ExerciseLevel(value.strip().lower())
            except ValueError:
                return ExerciseLevel.BEGINNER
        return value
