"""Key-value storage abstractions."""

from dataclasses import dataclass
from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for storing JSON-compatible values by key."""

    def get(self, key: str) -> object | None:
        """Return the stored value or ``None`` when the key is missing."""

    def set(self, key: str, value: object) -> None:
        """Store a value under a key, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store used in tests and ephemeral setups."""

    _values: dict[str, object]

    def __init__(self, initial: dict[str, object] | None = None) -> None:
        self._values = dict(initial or {})

    def get(self, key: str) -> object | None:
        """Return a stored value."""
        return self._values.get(key)

    def set(self, key: str, value: object) -> None:
        """Store a value."""
        self._values[key] = value

    def delete(self, key: str) -> None:
        """Remove a value."""
        self._values.pop(key, None)
