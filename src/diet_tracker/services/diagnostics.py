"""Provider error log for diagnostics."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from diet_tracker.services.key_value import KeyValueStore

ERROR_LOG_KEY = "api_error_log"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ProviderErrorLog:
    """Keeps the most recent provider failures in the key-value store."""

    store: KeyValueStore
    max_entries: int = 20
    max_message_length: int = 100
    now: Callable[[], datetime] = field(default=_utc_now)

    def record(self, provider: str, message: str) -> None:
        """Append a ``timestamp|provider|message`` entry."""
        entries = self.entries()
        timestamp = self.now().isoformat()
        entries.append(f"{timestamp}|{provider}|{message[: self.max_message_length]}")
        self.store.set(ERROR_LOG_KEY, entries[-self.max_entries :])

    def entries(self) -> list[str]:
        """Return stored entries, oldest first."""
        stored = self.store.get(ERROR_LOG_KEY)
        if not isinstance(stored, list):
            return []
        return [str(entry) for entry in stored]
