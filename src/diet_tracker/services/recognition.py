"""Food recognition with a primary provider and a fallback proxy."""

import logging
from dataclasses import dataclass
from typing import Protocol

from diet_tracker.domain.errors import (
    InvalidRequest,
    ProviderError,
    QuotaExceeded,
    RecognitionError,
)
from diet_tracker.domain.recognition import (
    FoodAnalysisResult,
    ProviderRequest,
    RequestKind,
    SearchResultItem,
)
from diet_tracker.services.diagnostics import ProviderErrorLog
from diet_tracker.services.normalization import (
    normalize_response,
    normalize_search_response,
)
from diet_tracker.services.quota import QuotaTracker

_logger = logging.getLogger(__name__)


class RecognitionProvider(Protocol):
    """Interface for a food recognition / nutrition backend."""

    name: str

    async def send(self, request: ProviderRequest) -> dict[str, object]:
        """Send a request and return the provider's raw payload."""


@dataclass
class RecognitionService:
    """Runs quota check, primary attempt, fallback attempt and normalization.

    Only the primary to fallback handoff is attempted; there are no retries or
    backoff. Quota is consumed when the fallback path is taken.
    """

    primary: RecognitionProvider
    fallback: RecognitionProvider
    quota: QuotaTracker
    error_log: ProviderErrorLog
    vision_model: str
    text_model: str
    debug: bool = False

    async def analyze_image(
        self, image_bytes: bytes, meal_type_hint: str | None = None
    ) -> FoodAnalysisResult:
        """Recognize the food in an image and return its nutrition."""
        request = ProviderRequest(
            kind=RequestKind.IMAGE_ANALYSIS,
            payload=image_bytes,
            model_hint=self.vision_model,
            meal_type=meal_type_hint,
        )
        raw = await self._dispatch(request)
        return normalize_response(raw)

    async def lookup_food(self, name: str) -> FoodAnalysisResult:
        """Look up nutrition facts for a named food."""
        cleaned = name.strip()
        if not cleaned:
            raise InvalidRequest("Food name must not be empty")
        request = ProviderRequest(
            kind=RequestKind.NAME_LOOKUP,
            payload=cleaned,
            model_hint=self.text_model,
        )
        raw = await self._dispatch(request)
        return normalize_response(raw)

    async def search_foods(self, query: str) -> list[SearchResultItem]:
        """Search foods matching a free-text query."""
        cleaned = query.strip()
        if not cleaned:
            return []
        request = ProviderRequest(
            kind=RequestKind.TEXT_SEARCH,
            payload=cleaned,
            model_hint=self.text_model,
        )
        raw = await self._dispatch(request)
        results = normalize_search_response(raw)
        if self.debug:
            _logger.info("Food search: query=%s results=%s", cleaned, len(results))
        return results

    def remaining_quota(self) -> int:
        """Return the number of calls left for today."""
        return self.quota.remaining()

    async def _dispatch(self, request: ProviderRequest) -> dict[str, object]:
        if self.quota.is_exceeded():
            raise QuotaExceeded(self.quota.daily_limit)

        try:
            return await self.primary.send(request)
        except Exception as exc:
            self._record_failure(self.primary.name, request, exc)

        self.quota.increment()
        try:
            return await self.fallback.send(request)
        except RecognitionError:
            raise
        except Exception as exc:
            raise ProviderError(self.fallback.name, str(exc) or type(exc).__name__) from exc

    def _record_failure(
        self, provider: str, request: ProviderRequest, exc: Exception
    ) -> None:
        message = str(exc) or type(exc).__name__
        try:
            _logger.warning(
                "%s %s failed, trying fallback: %s", provider, request.kind.value, message
            )
        except Exception:  # noqa: BLE001
            pass
        try:
            self.error_log.record(provider, message)
        except Exception:  # noqa: BLE001
            return
