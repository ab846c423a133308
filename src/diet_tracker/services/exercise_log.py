"""Exercise log service."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from diet_tracker.domain.exercise import ExerciseLog
from diet_tracker.services.key_value import KeyValueStore

EXERCISE_LOGS_KEY = "exercise_logs"


@dataclass
class ExerciseLogService:
    """Stores completed exercise sessions and sums calories burned."""

    store: KeyValueStore

    def add_log(self, log: ExerciseLog) -> ExerciseLog:
        """Append an exercise session."""
        logs = self.logs()
        logs.append(log)
        self._write(logs)
        return log

    def logs(self) -> list[ExerciseLog]:
        """Return every logged session."""
        stored = self.store.get(EXERCISE_LOGS_KEY)
        if not isinstance(stored, list):
            return []
        return [ExerciseLog.model_validate(item) for item in stored]

    def logs_in_range(self, start: date, end: date) -> list[ExerciseLog]:
        """Return sessions logged between two calendar days, inclusive."""
        return [log for log in self.logs() if start <= log.logged_at.date() <= end]

    def total_calories_burned(self, start: date, end: date) -> int:
        """Sum calories burned between two calendar days, inclusive."""
        return sum(log.calories_burned for log in self.logs_in_range(start, end))

    def delete_log(self, log_id: UUID) -> bool:
        """Delete a session; returns False when nothing was removed."""
        logs = self.logs()
        remaining = [log for log in logs if log.id != log_id]
        if len(remaining) == len(logs):
            return False
        self._write(remaining)
        return True

    def _write(self, logs: list[ExerciseLog]) -> None:
        self.store.set(EXERCISE_LOGS_KEY, [log.model_dump(mode="json") for log in logs])
