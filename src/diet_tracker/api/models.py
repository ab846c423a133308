"""Request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from diet_tracker.domain.food_log import FoodLogEntry


class FoodAnalysisResponse(BaseModel):
    """Recognition or lookup result returned to clients."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float


class ImageAnalysisResponse(BaseModel):
    """Image recognition result with quota info and optional log entry."""

    result: FoodAnalysisResponse
    remaining_quota: int
    entry: FoodLogEntry | None = None


class SearchResultResponse(BaseModel):
    """Single food search hit."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    source_id: str | None = None


class QuotaResponse(BaseModel):
    """Remaining daily quota."""

    remaining: int
    daily_limit: int


class FoodLogCreate(BaseModel):
    """Payload for adding a food log entry."""

    name: str = Field(min_length=1)
    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    meal_type: str = "snack"
    logged_at: datetime | None = None
    serving_size: float = Field(default=1.0, gt=0.0)
    serving_unit: str = "serving"


class WeightEntryCreate(BaseModel):
    """Payload for recording a weigh-in."""

    weight_kg: float = Field(gt=0.0)
    recorded_at: datetime | None = None
    note: str | None = None


class ExerciseLogCreate(BaseModel):
    """Payload for logging an exercise session."""

    exercise_id: str = Field(min_length=1)
    duration_minutes: int = Field(ge=0)
    calories_burned: int = Field(ge=0)
    intensity: str = "beginner"
    logged_at: datetime | None = None
    notes: str | None = None
    user_weight_kg: float | None = Field(default=None, gt=0.0)
