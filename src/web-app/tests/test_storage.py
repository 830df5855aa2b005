"""Tests for client key/value storage."""

from __future__ import annotations

import json

from search_app.storage import JsonFileStorage, MemoryStorage


class TestMemoryStorage:

    def test_set_get_remove(self) -> None:
        storage = MemoryStorage()
        assert storage.get_item("user") is None
        storage.set_item("user", "{}")
        assert storage.get_item("user") == "{}"
        storage.remove_item("user")
        assert storage.get_item("user") is None

    def test_remove_missing_key_is_noop(self) -> None:
        MemoryStorage().remove_item("missing")


class TestJsonFileStorage:
    """Durable storage in a single JSON file."""

    def test_persists_across_instances(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        JsonFileStorage(path).set_item("user", '{"id": "1"}')
        assert JsonFileStorage(path).get_item("user") == '{"id": "1"}'

    def test_creates_parent_directories(self, tmp_path) -> None:
        path = tmp_path / "nested" / "dir" / "session.json"
        JsonFileStorage(path).set_item("k", "v")
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_remove_item(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path / "s.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")
        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_missing_file_is_empty(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path / "absent.json")
        assert storage.get_item("user") is None
        storage.remove_item("user")
        assert not (tmp_path / "absent.json").exists()

    def test_corrupt_file_is_empty_and_replaced(self, tmp_path) -> None:
        path = tmp_path / "s.json"
        path.write_text("{not json")
        storage = JsonFileStorage(path)
        assert storage.get_item("user") is None
        storage.set_item("user", "x")
        assert json.loads(path.read_text()) == {"user": "x"}

    def test_non_object_file_is_empty(self, tmp_path) -> None:
        path = tmp_path / "s.json"
        path.write_text("[1, 2, 3]")
        assert JsonFileStorage(path).get_item("0") is None

    def test_non_string_value_is_ignored(self, tmp_path) -> None:
        path = tmp_path / "s.json"
        path.write_text(json.dumps({"user": {"id": "1"}}))
        assert JsonFileStorage(path).get_item("user") is None

    def test_no_temp_file_left_behind(self, tmp_path) -> None:
        JsonFileStorage(tmp_path / "s.json").set_item("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["s.json"]
