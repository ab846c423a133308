"""Food log service storing entries per calendar day."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.food_log import FoodLogEntry, MacroTotals, MealType
from diet_tracker.domain.recognition import FoodAnalysisResult
from diet_tracker.services.key_value import KeyValueStore

FOOD_ENTRIES_KEY_PREFIX = "food_entries"

_logger = logging.getLogger(__name__)


class FoodImageStore(Protocol):
    """Persistence interface for captured food photos."""

    def save(self, image_bytes: bytes) -> str:
        """Store a photo and return a path that refers to it."""


@dataclass
class FoodLogService:
    """Service that turns recognition results into stored food log entries."""

    store: KeyValueStore
    now: Callable[[], datetime] = field(default=datetime.now)
    image_store: FoodImageStore | None = None

    def entry_from_analysis(
        self,
        result: FoodAnalysisResult,
        meal_type: str | None,
        image_path: str | None = None,
    ) -> FoodLogEntry:
        """Build an unsaved entry from a recognition result."""
        return FoodLogEntry(
            name=result.name,
            calories=result.calories,
            protein=result.protein,
            carbs=result.carbs,
            fat=result.fat,
            meal_type=MealType.parse(meal_type),
            logged_at=self.now(),
            image_path=image_path,
        )

    def log_analysis(
        self,
        result: FoodAnalysisResult,
        meal_type: str | None,
        image_bytes: bytes | None = None,
    ) -> FoodLogEntry:
        """Save a recognition result, keeping the photo when a store is set."""
        image_path = None
        if image_bytes and self.image_store is not None:
            try:
                image_path = self.image_store.save(image_bytes)
            except OSError as exc:
                _logger.warning("Failed to save food image: %s", exc)
        return self.save_entry(self.entry_from_analysis(result, meal_type, image_path))

    def save_entry(self, entry: FoodLogEntry) -> FoodLogEntry:
        """Append an entry to its day's log."""
        day = entry.logged_at.date()
        entries = self.list_entries(day)
        entries.append(entry)
        self._write(day, entries)
        return entry

    def save_entries(self, entries: list[FoodLogEntry]) -> None:
        """Append several entries, grouping writes by day."""
        by_day: dict[date, list[FoodLogEntry]] = {}
        for entry in entries:
            day = entry.logged_at.date()
            if day not in by_day:
                by_day[day] = self.list_entries(day)
            by_day[day].append(entry)
        for day, day_entries in by_day.items():
            self._write(day, day_entries)

    def list_entries(self, day: date) -> list[FoodLogEntry]:
        """Return all entries logged on a day."""
        stored = self.store.get(_day_key(day))
        if not isinstance(stored, list):
            return []
        return [FoodLogEntry.model_validate(item) for item in stored]

    def entries_by_meal(self, day: date) -> dict[MealType, list[FoodLogEntry]]:
        """Return a day's entries grouped by meal type."""
        grouped: dict[MealType, list[FoodLogEntry]] = {meal: [] for meal in MealType}
        for entry in self.list_entries(day):
            grouped[entry.meal_type].append(entry)
        return grouped

    def update_entry(self, entry: FoodLogEntry) -> bool:
        """Replace an existing entry; returns False when it is not found."""
        day = entry.logged_at.date()
        entries = self.list_entries(day)
        for index, existing in enumerate(entries):
            if existing.id == entry.id:
                entries[index] = entry
                self._write(day, entries)
                return True
        return False

    def delete_entry(self, entry_id: UUID, day: date) -> bool:
        """Delete an entry; returns False when nothing was removed."""
        entries = self.list_entries(day)
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self._write(day, remaining)
        return True

    def daily_totals(self, day: date) -> MacroTotals:
        """Sum macros for a day, scaled by serving size."""
        totals = MacroTotals()
        for entry in self.list_entries(day):
            totals.calories += entry.calories * entry.serving_size
            totals.protein += entry.protein * entry.serving_size
            totals.carbs += entry.carbs * entry.serving_size
            totals.fat += entry.fat * entry.serving_size
        return totals

    def _write(self, day: date, entries: list[FoodLogEntry]) -> None:
        self.store.set(
            _day_key(day), [entry.model_dump(mode="json") for entry in entries]
        )


def _day_key(day: date) -> str:
    return f"{FOOD_ENTRIES_KEY_PREFIX}_{day.isoformat()}"
