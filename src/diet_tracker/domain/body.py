"""Models for the user profile and body weight history."""

from datetime import date, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """Personal details; height and weights are always stored in metric units."""

    id: UUID = Field(default_factory=uuid4)
    name: str | None = None
    age: int | None = Field(default=None, ge=0)
    height_cm: float | None = Field(default=None, gt=0.0)
    is_metric: bool = True
    gender: str | None = None
    goal_weight_kg: float | None = Field(default=None, gt=0.0)
    activity_level: float | None = Field(default=None, ge=1.2, le=1.9)
    birth_date: date | None = None
    monthly_weight_goal_kg: float | None = None


class WeightEntry(BaseModel):
    """A single body weight measurement in kilograms."""

    id: UUID = Field(default_factory=uuid4)
    weight_kg: float = Field(gt=0.0)
    recorded_at: datetime
    note: str | None = None
