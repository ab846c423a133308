"""Tests for key-value store adapters."""

import json
from dataclasses import dataclass, field

import pytest

from diet_tracker.adapters.json_file_store import JsonFileKeyValueStore
from diet_tracker.adapters.supabase_key_value_store import SupabaseKeyValueStore


def test_json_file_store_persists_across_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "store.json"
    store = JsonFileKeyValueStore(path=path)

    store.set("food_api_quota_used", 4)
    store.set("api_error_log", ["a", "b"])

    reopened = JsonFileKeyValueStore.create(str(path))
    assert reopened.get("food_api_quota_used") == 4
    assert reopened.get("api_error_log") == ["a", "b"]
    assert reopened.get("missing") is None


def test_json_file_store_delete(tmp_path) -> None:
    store = JsonFileKeyValueStore(path=tmp_path / "store.json")
    store.set("key", "value")

    store.delete("key")
    store.delete("never-set")

    assert store.get("key") is None


def test_json_file_store_rejects_non_object_file(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(RuntimeError):
        JsonFileKeyValueStore(path=path).get("key")


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: dict[str, dict[str, object]] = field(default_factory=dict)
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_conflict: str | None = None

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self._payload = payload
        self.last_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        key = self.last_filters[-1][1] if self.last_filters else None
        if self._action == "select":
            row = self.rows.get(str(key))
            return FakeResponse(data=[row] if row else [])
        if self._action == "upsert":
            self.rows[self._payload["key"]] = self._payload
            return FakeResponse(data=[self._payload])
        self.rows.pop(str(key), None)
        return FakeResponse(data=[])


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_store_round_trip() -> None:
    client = FakeSupabaseClient()
    store = SupabaseKeyValueStore(client)  # type: ignore[arg-type]

    store.set("food_api_quota_date", "2024-05-01")

    table = client.tables["key_value_store"]
    assert table.last_conflict == "key"
    assert "updated_at" in table.rows["food_api_quota_date"]
    assert store.get("food_api_quota_date") == "2024-05-01"
    assert store.get("missing") is None

    store.delete("food_api_quota_date")
    assert store.get("food_api_quota_date") is None


def test_json_file_store_deletes_null_values(tmp_path) -> None:
    path = tmp_path / "store.json"
    store = JsonFileKeyValueStore(path=path)
    store.set("cleared", None)

    store.delete("cleared")

    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_json_file_store_corrupt_file_is_runtime_error(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(RuntimeError, match="not valid JSON"):
        JsonFileKeyValueStore(path=path).get("key")
