"""Tests for the recognition service fallback flow."""

import asyncio

import pytest

from diet_tracker.domain.errors import (
    CorrelationMismatch,
    InvalidRequest,
    ProviderError,
    QuotaExceeded,
    UnsupportedResponseShape,
)
from diet_tracker.domain.recognition import FoodAnalysisResult, RequestKind
from diet_tracker.services import recognition
from diet_tracker.services.diagnostics import ERROR_LOG_KEY
from diet_tracker.services.key_value import InMemoryKeyValueStore
from diet_tracker.services.quota import QUOTA_DATE_KEY, QUOTA_USED_KEY
from tests.conftest import (
    FailingProvider,
    RecordingProvider,
    build_recognition_service,
)

CATEGORY_PAYLOAD = {
    "category": {"name": "Grilled Salmon"},
    "nutrition": {"calories": 412, "protein": 40, "carbs": 0, "fat": 27},
}


def test_primary_success_skips_fallback_and_quota() -> None:
    primary = RecordingProvider(name="Primary")
    fallback = RecordingProvider(name="Fallback")
    service = build_recognition_service(primary, fallback)
    before = service.remaining_quota()

    result = asyncio.run(service.analyze_image(b"\xff\xd8\xffimage", "lunch"))

    assert result == FoodAnalysisResult(
        name="Chicken Salad", calories=350.0, protein=30.0, carbs=10.0, fat=15.0
    )
    assert len(primary.requests) == 1
    assert primary.requests[0].kind is RequestKind.IMAGE_ANALYSIS
    assert primary.requests[0].model_hint == "gpt-4.1-mini"
    assert primary.requests[0].meal_type == "lunch"
    assert fallback.requests == []
    assert service.remaining_quota() == before


def test_primary_timeout_uses_fallback_and_consumes_quota() -> None:
    store = InMemoryKeyValueStore()
    primary = FailingProvider(name="Primary")
    fallback = RecordingProvider(name="Fallback", payload=CATEGORY_PAYLOAD)
    service = build_recognition_service(primary, fallback, store=store)
    before = service.remaining_quota()

    result = asyncio.run(service.analyze_image(b"image", None))

    assert result == FoodAnalysisResult(
        name="Grilled Salmon", calories=412.0, protein=40.0, carbs=0.0, fat=27.0
    )
    assert len(primary.requests) == 1
    assert len(fallback.requests) == 1
    assert fallback.requests[0] is primary.requests[0]
    assert store.get(QUOTA_USED_KEY) == 1
    assert service.remaining_quota() == before - 1
    logged = store.get(ERROR_LOG_KEY)
    assert isinstance(logged, list)
    assert len(logged) == 1
    assert "|Primary|" in logged[0]


def test_unexpected_primary_exception_also_falls_back() -> None:
    primary = FailingProvider(name="Primary", error=TimeoutError())
    fallback = RecordingProvider(name="Fallback", payload=CATEGORY_PAYLOAD)
    service = build_recognition_service(primary, fallback)

    result = asyncio.run(service.lookup_food("salmon"))

    assert result.name == "Grilled Salmon"
    assert len(fallback.requests) == 1


def test_quota_exhausted_fails_without_network_calls() -> None:
    store = InMemoryKeyValueStore({QUOTA_DATE_KEY: "2024-05-01", QUOTA_USED_KEY: 3})
    primary = RecordingProvider(name="Primary")
    fallback = RecordingProvider(name="Fallback")
    service = build_recognition_service(primary, fallback, store=store, daily_limit=3)
    assert service.remaining_quota() == 0

    with pytest.raises(QuotaExceeded):
        asyncio.run(service.analyze_image(b"image", "dinner"))

    assert primary.requests == []
    assert fallback.requests == []


def test_both_providers_failing_raises_provider_error() -> None:
    primary = FailingProvider(name="Primary")
    fallback = FailingProvider(
        name="Fallback", error=ProviderError("Fallback", "HTTP error 503")
    )
    service = build_recognition_service(primary, fallback)

    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(service.lookup_food("pizza"))

    assert excinfo.value.provider == "Fallback"


def test_unstructured_fallback_error_is_wrapped() -> None:
    primary = FailingProvider(name="Primary")
    fallback = FailingProvider(name="Fallback", error=KeyError("choices"))
    service = build_recognition_service(primary, fallback)

    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(service.lookup_food("pizza"))

    assert excinfo.value.provider == "Fallback"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_correlation_mismatch_propagates() -> None:
    primary = FailingProvider(name="Primary")
    fallback = FailingProvider(
        name="Fallback", error=CorrelationMismatch("abc", "xyz")
    )
    service = build_recognition_service(primary, fallback)

    with pytest.raises(CorrelationMismatch):
        asyncio.run(service.analyze_image(b"image"))


def test_unsupported_primary_payload_is_terminal() -> None:
    primary = RecordingProvider(name="Primary", payload={"annotations": []})
    fallback = RecordingProvider(name="Fallback")
    service = build_recognition_service(primary, fallback)

    with pytest.raises(UnsupportedResponseShape):
        asyncio.run(service.analyze_image(b"image"))

    assert fallback.requests == []


def test_search_uses_text_model_and_parses_items() -> None:
    primary = RecordingProvider(
        name="Primary",
        payload={"content": '[{"name": "Banana", "calories": 105, "carbs": 27}]'},
    )
    service = build_recognition_service(primary, RecordingProvider(name="Fallback"))

    results = asyncio.run(service.search_foods("  banana "))

    assert [item.name for item in results] == ["Banana"]
    assert primary.requests[0].kind is RequestKind.TEXT_SEARCH
    assert primary.requests[0].payload == "banana"
    assert primary.requests[0].model_hint == "gpt-4.1-nano"


def test_blank_search_returns_empty_without_calls() -> None:
    primary = RecordingProvider(name="Primary")
    service = build_recognition_service(primary, RecordingProvider(name="Fallback"))

    assert asyncio.run(service.search_foods("   ")) == []
    assert primary.requests == []


def test_blank_lookup_is_rejected() -> None:
    service = build_recognition_service(
        RecordingProvider(name="Primary"), RecordingProvider(name="Fallback")
    )

    with pytest.raises(InvalidRequest):
        asyncio.run(service.lookup_food(" "))


def test_error_log_failure_does_not_block_fallback() -> None:
    class ExplodingLog:
        def record(self, provider: str, message: str) -> None:
            raise RuntimeError("disk full")

    primary = FailingProvider(name="Primary")
    fallback = RecordingProvider(name="Fallback", payload=CATEGORY_PAYLOAD)
    service = build_recognition_service(primary, fallback)
    service.error_log = ExplodingLog()  # type: ignore[assignment]

    result = asyncio.run(service.lookup_food("salmon"))

    assert result.name == "Grilled Salmon"


def test_logger_failure_still_records_error_log(monkeypatch) -> None:
    def exploding_warning(*args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        raise RuntimeError("log handler closed")

    monkeypatch.setattr(recognition._logger, "warning", exploding_warning)
    store = InMemoryKeyValueStore()
    primary = FailingProvider(name="Primary")
    fallback = RecordingProvider(name="Fallback", payload=CATEGORY_PAYLOAD)
    service = build_recognition_service(primary, fallback, store=store)

    result = asyncio.run(service.lookup_food("salmon"))

    assert result.name == "Grilled Salmon"
    (entry,) = store.get(ERROR_LOG_KEY)
    assert "|Primary|" in entry
    assert entry.endswith("request timed out")

