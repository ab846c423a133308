"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from diet_tracker.api.admin import router as admin_router
from diet_tracker.api.models import (
    FoodAnalysisResponse,
    FoodLogCreate,
    ImageAnalysisResponse,
    QuotaResponse,
    SearchResultResponse,
)
from diet_tracker.api.tracking import router as tracking_router
from diet_tracker.app_logging import configure_logging
from diet_tracker.containers import AppContainer
from diet_tracker.domain.errors import (
    CorrelationMismatch,
    InvalidRequest,
    ProviderError,
    QuotaExceeded,
    RecognitionError,
    UnsupportedResponseShape,
)
from diet_tracker.domain.food_log import FoodLogEntry, MealType

_ERROR_STATUS: list[tuple[type[RecognitionError], int]] = [
    (InvalidRequest, status.HTTP_400_BAD_REQUEST),
    (QuotaExceeded, status.HTTP_429_TOO_MANY_REQUESTS),
    (UnsupportedResponseShape, 422),
    (CorrelationMismatch, status.HTTP_502_BAD_GATEWAY),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(tracking_router)

    @app.exception_handler(RecognitionError)
    async def recognition_error_handler(
        request: Request, exc: RecognitionError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        logger.info("Recognition failed (%s): %s", status_code, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recognition/image")
    async def analyze_image(
        request: Request,
        meal_type: str | None = None,
        log: bool = False,
    ) -> ImageAnalysisResponse:
        """Recognize the food in the raw image bytes of the request body."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image body"
            )
        result = await state_container.recognition_service.analyze_image(
            image_bytes, meal_type
        )
        entry = None
        if log:
            entry = state_container.food_log_service.log_analysis(
                result, meal_type, image_bytes
            )
        return ImageAnalysisResponse(
            result=FoodAnalysisResponse(**asdict(result)),
            remaining_quota=state_container.recognition_service.remaining_quota(),
            entry=entry,
        )

    @app.get("/foods/lookup")
    async def lookup_food(
        request: Request, name: str = Query(min_length=1)
    ) -> FoodAnalysisResponse:
        """Look up nutrition facts for a named food."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.recognition_service.lookup_food(name)
        return FoodAnalysisResponse(**asdict(result))

    @app.get("/foods/search")
    async def search_foods(
        request: Request, query: str = Query(min_length=1)
    ) -> dict[str, list[SearchResultResponse]]:
        """Search foods by free-text query."""
        state_container: AppContainer = request.app.state.container
        results = await state_container.recognition_service.search_foods(query)
        return {"results": [SearchResultResponse(**asdict(item)) for item in results]}

    @app.get("/quota")
    async def quota(request: Request) -> QuotaResponse:
        """Return the remaining provider quota for today."""
        state_container: AppContainer = request.app.state.container
        return QuotaResponse(
            remaining=state_container.recognition_service.remaining_quota(),
            daily_limit=state_container.quota_tracker.daily_limit,
        )

    @app.get("/food-log/{day}")
    async def food_log(day: date, request: Request) -> dict[str, object]:
        """Return a day's food log grouped by meal with totals."""
        state_container: AppContainer = request.app.state.container
        service = state_container.food_log_service
        grouped = service.entries_by_meal(day)
        return {
            "day": day.isoformat(),
            "meals": {
                meal.value: [entry.model_dump(mode="json") for entry in entries]
                for meal, entries in grouped.items()
            },
            "totals": service.daily_totals(day).model_dump(),
        }

    @app.post("/food-log", status_code=status.HTTP_201_CREATED)
    async def add_food_log_entry(
        payload: FoodLogCreate, request: Request
    ) -> FoodLogEntry:
        """Add a food log entry."""
        state_container: AppContainer = request.app.state.container
        service = state_container.food_log_service
        entry = FoodLogEntry(
            name=payload.name,
            calories=payload.calories,
            protein=payload.protein,
            carbs=payload.carbs,
            fat=payload.fat,
            meal_type=MealType.parse(payload.meal_type),
            logged_at=payload.logged_at or service.now(),
            serving_size=payload.serving_size,
            serving_unit=payload.serving_unit,
        )
        return service.save_entry(entry)

    @app.delete("/food-log/{day}/{entry_id}")
    async def delete_food_log_entry(
        day: date, entry_id: UUID, request: Request
    ) -> dict[str, str]:
        """Delete a food log entry."""
        state_container: AppContainer = request.app.state.container
        if not state_container.food_log_service.delete_entry(entry_id, day):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    return app


def _status_for(exc: RecognitionError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
