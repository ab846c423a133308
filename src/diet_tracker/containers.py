"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.json_file_store import JsonFileKeyValueStore
from diet_tracker.adapters.local_image_store import LocalImageStore
from diet_tracker.adapters.openai_provider import OpenAIRecognitionProvider
from diet_tracker.adapters.proxy_provider import HttpxProxyProvider
from diet_tracker.adapters.supabase_key_value_store import SupabaseKeyValueStore
from diet_tracker.config import Settings, parse_storage_backend
from diet_tracker.services.diagnostics import ProviderErrorLog
from diet_tracker.services.exercise_log import ExerciseLogService
from diet_tracker.services.food_log import FoodLogService
from diet_tracker.services.key_value import KeyValueStore
from diet_tracker.services.quota import QuotaTracker
from diet_tracker.services.recognition import RecognitionService
from diet_tracker.services.user_profile import UserProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    quota_tracker: QuotaTracker
    error_log: ProviderErrorLog
    recognition_service: RecognitionService
    food_log_service: FoodLogService
    user_profile_service: UserProfileService
    exercise_log_service: ExerciseLogService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by settings."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires SUPABASE_URL and key")
        return SupabaseKeyValueStore(
            create_client(settings.supabase_url, settings.supabase_service_key)
        )
    return JsonFileKeyValueStore.create(settings.storage_path)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    quota_tracker = QuotaTracker(
        store=store, daily_limit=resolved_settings.daily_quota_limit
    )
    error_log = ProviderErrorLog(store)
    primary = OpenAIRecognitionProvider.create(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
        text_timeout_seconds=resolved_settings.primary_timeout_seconds,
        image_timeout_seconds=resolved_settings.image_timeout_seconds,
    )
    fallback = HttpxProxyProvider.create(
        base_url=resolved_settings.fallback_base_url,
        api_key=resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.fallback_timeout_seconds,
    )
    recognition_service = RecognitionService(
        primary=primary,
        fallback=fallback,
        quota=quota_tracker,
        error_log=error_log,
        vision_model=resolved_settings.openai_vision_model,
        text_model=resolved_settings.openai_text_model,
        debug=resolved_settings.debug,
    )
    food_log_service = FoodLogService(
        store, image_store=LocalImageStore.create(resolved_settings.image_dir)
    )

    async def close_resources() -> None:
        await primary.close()
        await fallback.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        quota_tracker=quota_tracker,
        error_log=error_log,
        recognition_service=recognition_service,
        food_log_service=food_log_service,
        user_profile_service=UserProfileService(store),
        exercise_log_service=ExerciseLogService(store),
        close_resources=close_resources,
    )
