"""Profile, weight history and exercise log endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, status

from diet_tracker.api.models import ExerciseLogCreate, WeightEntryCreate
from diet_tracker.domain.body import UserProfile, WeightEntry
from diet_tracker.domain.exercise import ExerciseLog

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(tags=["tracking"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/profile")
async def get_profile(request: Request) -> UserProfile:
    """Return the saved user profile."""
    profile = _container(request).user_profile_service.get_profile()
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return profile


@router.put("/profile")
async def save_profile(profile: UserProfile, request: Request) -> UserProfile:
    """Create or replace the user profile."""
    return _container(request).user_profile_service.save_profile(profile)


@router.get("/weight")
async def list_weight_entries(
    start: date, end: date, request: Request
) -> dict[str, list[WeightEntry]]:
    """Return weigh-ins between two days, inclusive."""
    service = _container(request).user_profile_service
    return {"entries": service.weight_entries_in_range(start, end)}


@router.get("/weight/latest")
async def latest_weight_entry(request: Request) -> WeightEntry:
    """Return the most recent weigh-in."""
    entry = _container(request).user_profile_service.latest_weight_entry()
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return entry


@router.get("/weight/change")
async def weight_change(since: datetime, request: Request) -> dict[str, float | None]:
    """Return the weight change since a point in time."""
    service = _container(request).user_profile_service
    return {"change_kg": service.weight_change_since(since)}


@router.post("/weight", status_code=status.HTTP_201_CREATED)
async def add_weight_entry(payload: WeightEntryCreate, request: Request) -> WeightEntry:
    """Record a weigh-in."""
    entry = WeightEntry(
        weight_kg=payload.weight_kg,
        recorded_at=payload.recorded_at or datetime.now(),
        note=payload.note,
    )
    return _container(request).user_profile_service.add_weight_entry(entry)


@router.delete("/weight/{entry_id}")
async def delete_weight_entry(entry_id: UUID, request: Request) -> dict[str, str]:
    """Delete a weigh-in."""
    if not _container(request).user_profile_service.delete_weight_entry(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/exercise-log")
async def list_exercise_logs(
    start: date, end: date, request: Request
) -> dict[str, object]:
    """Return exercise sessions and calories burned between two days."""
    service = _container(request).exercise_log_service
    return {
        "logs": [
            log.model_dump(mode="json") for log in service.logs_in_range(start, end)
        ],
        "calories_burned": service.total_calories_burned(start, end),
    }


@router.post("/exercise-log", status_code=status.HTTP_201_CREATED)
async def add_exercise_log(payload: ExerciseLogCreate, request: Request) -> ExerciseLog:
    """Log an exercise session."""
    log = ExerciseLog(
        exercise_id=payload.exercise_id,
        logged_at=payload.logged_at or datetime.now(),
        duration_minutes=payload.duration_minutes,
        calories_burned=payload.calories_burned,
        intensity=payload.intensity,
        notes=payload.notes,
        user_weight_kg=payload.user_weight_kg,
    )
    return _container(request).exercise_log_service.add_log(log)


@router.delete("/exercise-log/{log_id}")
async def delete_exercise_log(log_id: UUID, request: Request) -> dict[str, str]:
    """Delete an exercise session."""
    if not _container(request).exercise_log_service.delete_log(log_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}
