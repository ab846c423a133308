"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from diet_tracker.adapters.local_image_store import LocalImageStore
from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.errors import ProviderError
from diet_tracker.domain.recognition import ProviderRequest
from diet_tracker.services.diagnostics import ProviderErrorLog
from diet_tracker.services.exercise_log import ExerciseLogService
from diet_tracker.services.food_log import FoodLogService
from diet_tracker.services.key_value import InMemoryKeyValueStore, KeyValueStore
from diet_tracker.services.quota import QuotaTracker
from diet_tracker.services.recognition import RecognitionProvider, RecognitionService
from diet_tracker.services.user_profile import UserProfileService

CHICKEN_SALAD_TEXT = (
    "Food Name: Chicken Salad\nCalories: 350 cal\nProtein: 30 g\nCarbs: 10 g\nFat: 15 g"
)


@dataclass
class RecordingProvider(RecognitionProvider):
    """Fake provider returning a fixed payload and recording requests."""

    payload: dict[str, object] = field(
        default_factory=lambda: {"content": CHICKEN_SALAD_TEXT}
    )
    name: str = "Recording"
    requests: list[ProviderRequest] = field(default_factory=list)

    async def send(self, request: ProviderRequest) -> dict[str, object]:
        self.requests.append(request)
        return self.payload


@dataclass
class FailingProvider(RecognitionProvider):
    """Fake provider that always raises."""

    error: Exception = field(
        default_factory=lambda: ProviderError("Failing", "request timed out")
    )
    name: str = "Failing"
    requests: list[ProviderRequest] = field(default_factory=list)

    async def send(self, request: ProviderRequest) -> dict[str, object]:
        self.requests.append(request)
        raise self.error


@dataclass
class BrokenKeyValueStore(KeyValueStore):
    """Store whose every operation fails."""

    def get(self, key: str) -> object | None:
        raise RuntimeError("storage unavailable")

    def set(self, key: str, value: object) -> None:
        raise RuntimeError("storage unavailable")

    def delete(self, key: str) -> None:
        raise RuntimeError("storage unavailable")


@dataclass
class FixedClock:
    """Settable calendar day for quota tests."""

    current: date = date(2024, 5, 1)

    def __call__(self) -> date:
        return self.current


def build_recognition_service(
    primary: RecognitionProvider,
    fallback: RecognitionProvider,
    store: KeyValueStore | None = None,
    daily_limit: int = 150,
    clock: FixedClock | None = None,
) -> RecognitionService:
    resolved_store = store if store is not None else InMemoryKeyValueStore()
    return RecognitionService(
        primary=primary,
        fallback=fallback,
        quota=QuotaTracker(
            store=resolved_store,
            daily_limit=daily_limit,
            today=clock or FixedClock(),
        ),
        error_log=ProviderErrorLog(resolved_store),
        vision_model="gpt-4.1-mini",
        text_model="gpt-4.1-nano",
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        fallback_base_url="https://proxy.test",
        storage_path=str(tmp_path / "store.json"),
        image_dir=str(tmp_path / "images"),
        admin_token="admin-token",
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def primary() -> RecordingProvider:
    return RecordingProvider(name="Primary")


@pytest.fixture
def fallback() -> RecordingProvider:
    return RecordingProvider(
        name="Fallback",
        payload={
            "category": {"name": "Grilled Salmon"},
            "nutrition": {
                "calories": 412,
                "protein": 40,
                "carbs": 0,
                "fat": 27,
            },
        },
    )


@pytest.fixture
def container(
    tmp_path,
    settings: Settings,
    store: InMemoryKeyValueStore,
    clock: FixedClock,
    primary: RecordingProvider,
    fallback: RecordingProvider,
) -> AppContainer:
    recognition_service = build_recognition_service(
        primary=primary, fallback=fallback, store=store, clock=clock
    )
    food_log_service = FoodLogService(
        store,
        now=lambda: datetime(2024, 5, 1, 12, 30),
        image_store=LocalImageStore(directory=tmp_path / "images"),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        quota_tracker=recognition_service.quota,
        error_log=recognition_service.error_log,
        recognition_service=recognition_service,
        food_log_service=food_log_service,
        user_profile_service=UserProfileService(store),
        exercise_log_service=ExerciseLogService(store),
        close_resources=close_resources,
    )
