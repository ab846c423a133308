"""Key-value store persisted as a single local JSON file."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from diet_tracker.services.key_value import KeyValueStore


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores all keys in one JSON object on disk."""

    path: Path

    @classmethod
    def create(cls, path: str) -> "JsonFileKeyValueStore":
        """Create a store for the given file path."""
        return cls(path=Path(path))

    def get(self, key: str) -> object | None:
        """Return the stored value for a key."""
        return self._load().get(key)

    def set(self, key: str, value: object) -> None:
        """Store a value and rewrite the file."""
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        """Remove a key and rewrite the file."""
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Storage file {self.path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise RuntimeError(f"Storage file {self.path} does not hold an object")
        return data

    def _save(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self.path)
