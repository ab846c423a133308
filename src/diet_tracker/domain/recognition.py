"""Food recognition domain models."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

UNIDENTIFIED_FOOD_NAME = "Unidentified Food Item"
UNKNOWN_FOOD_NAME = "Unknown Food"


class RequestKind(Enum):
    """Kinds of provider requests."""

    IMAGE_ANALYSIS = "image_analysis"
    NAME_LOOKUP = "name_lookup"
    TEXT_SEARCH = "text_search"


@dataclass(frozen=True)
class FoodAnalysisResult:
    """Canonical nutrition record for a single recognized food."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class SearchResultItem:
    """Single food returned by a text search."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    source_id: str | None = None


@dataclass(frozen=True)
class ProviderRequest:
    """Request handed to a recognition provider."""

    kind: RequestKind
    payload: bytes | str
    model_hint: str
    meal_type: str | None = None


@dataclass(frozen=True)
class QuotaState:
    """Quota usage for a calendar day."""

    date: date
    used_count: int
