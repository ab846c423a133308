"""Tests for container wiring."""

import asyncio

import pytest

from diet_tracker.adapters.json_file_store import JsonFileKeyValueStore
from diet_tracker.config import Settings, parse_storage_backend
from diet_tracker.containers import build_container, build_store


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.recognition_service is not None
    assert container.recognition_service.quota is container.quota_tracker
    assert isinstance(container.store, JsonFileKeyValueStore)
    assert container.user_profile_service.store is container.store
    assert container.exercise_log_service.store is container.store
    assert container.food_log_service.image_store is not None
    asyncio.run(container.close_resources())


def test_supabase_backend_requires_credentials(settings: Settings) -> None:
    settings.storage_backend = "supabase"

    with pytest.raises(ValueError):
        build_store(settings)


def test_parse_storage_backend() -> None:
    assert parse_storage_backend(" JSON ") == "file"
    assert parse_storage_backend("supabase") == "supabase"
    with pytest.raises(ValueError):
        parse_storage_backend("redis")
