"""Tests for boxpusher.core.storage – persistent key/value store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from boxpusher.core.storage import KeyValueStore, Namespace, StoredEntry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "storage.json"


@pytest.fixture()
def store(store_path: Path) -> KeyValueStore:
    return KeyValueStore(store_path)


# ---------------------------------------------------------------------------
# KeyValueStore – basic operations
# ---------------------------------------------------------------------------

class TestKeyValueStore:
    def test_creates_parent_directory(self, store: KeyValueStore, store_path: Path):
        assert store_path.parent.is_dir()

    def test_missing_key_is_none(self, store: KeyValueStore):
        assert store.get_item("nope") is None

    def test_set_and_get(self, store: KeyValueStore):
        store.set_item("a", "1")
        assert store.get_item("a") == "1"

    def test_overwrite_keeps_single_key(self, store: KeyValueStore):
        store.set_item("a", "1")
        store.set_item("a", "2")
        assert store.keys() == ["a"]
        assert store.get_item("a") == "2"

    def test_keys_in_insertion_order(self, store: KeyValueStore):
        for key in ("c", "a", "b"):
            store.set_item(key, key)
        assert store.keys() == ["c", "a", "b"]

    def test_remove(self, store: KeyValueStore):
        store.set_item("a", "1")
        store.remove_item("a")
        assert store.get_item("a") is None

    def test_remove_missing_is_noop(self, store: KeyValueStore, store_path: Path):
        store.remove_item("missing")
        assert store.keys() == []
        assert not store_path.exists()

    def test_default_path_under_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        s = KeyValueStore()
        assert s.file_path == tmp_path / ".boxpusher" / "storage.json"


# ---------------------------------------------------------------------------
# KeyValueStore – persistence
# ---------------------------------------------------------------------------

class TestPersistence:
    def test_survives_reopen(self, store: KeyValueStore, store_path: Path):
        store.set_item("level/x", "eee")
        reopened = KeyValueStore(store_path)
        assert reopened.get_item("level/x") == "eee"

    def test_remove_persists(self, store: KeyValueStore, store_path: Path):
        store.set_item("a", "1")
        store.remove_item("a")
        assert json.loads(store_path.read_text(encoding="utf-8")) == {}

    def test_corrupt_file_starts_empty(self, store_path: Path, caplog: pytest.LogCaptureFixture):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("NOT VALID JSON", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="boxpusher.core.storage"):
            s = KeyValueStore(store_path)
            assert s.keys() == []
        assert "Could not load storage" in caplog.text

    def test_corrupt_file_moved_aside_before_write(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("NOT VALID JSON", encoding="utf-8")
        s = KeyValueStore(store_path)
        s.set_item("a", "1")
        assert s.corrupt_path.read_text(encoding="utf-8") == "NOT VALID JSON"
        assert json.loads(store_path.read_text(encoding="utf-8")) == {"a": "1"}

    def test_write_leaves_no_temp_file(self, store: KeyValueStore, store_path: Path):
        store.set_item("a", "1")
        assert [p.name for p in store_path.parent.iterdir()] == ["storage.json"]

    def test_non_object_file_starts_empty(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("[1, 2]", encoding="utf-8")
        assert KeyValueStore(store_path).keys() == []

    def test_non_string_values_skipped(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps({"a": "ok", "b": 3}), encoding="utf-8")
        s = KeyValueStore(store_path)
        assert s.keys() == ["a"]


# ---------------------------------------------------------------------------
# Namespace
# ---------------------------------------------------------------------------

class TestNamespace:
    def test_entries_strip_prefix(self, store: KeyValueStore):
        ns = Namespace(store, "level/")
        ns.put("first", "abc")
        ns.put("second", "def")
        assert ns.entries() == [StoredEntry("first", "abc"), StoredEntry("second", "def")]

    def test_entries_ignore_other_prefixes(self, store: KeyValueStore):
        store.set_item("save/x", "1")
        store.set_item("custom_save/x", "2")
        assert Namespace(store, "save/").entries() == [StoredEntry("x", "1")]
        assert Namespace(store, "custom_save/").entries() == [StoredEntry("x", "2")]

    def test_get_and_delete(self, store: KeyValueStore):
        ns = Namespace(store, "p/")
        ns.put("k", "v")
        assert ns.get("k") == "v"
        assert store.get_item("p/k") == "v"
        ns.delete("k")
        assert ns.get("k") is None

    def test_empty_name_accepted(self, store: KeyValueStore):
        ns = Namespace(store, "level/")
        ns.put("", "raw")
        assert ns.entries() == [StoredEntry("", "raw")]


# ---------------------------------------------------------------------------
# Several stores on one file
# ---------------------------------------------------------------------------

class TestSharedFile:
    def test_writes_from_both_stores_kept(self, store_path: Path):
        first = KeyValueStore(store_path)
        second = KeyValueStore(store_path)
        first.set_item("level/mine", "eee")
        second.set_item("save/slot", "{}")
        assert KeyValueStore(store_path).keys() == ["level/mine", "save/slot"]

    def test_reads_see_other_store_writes(self, store_path: Path):
        first = KeyValueStore(store_path)
        second = KeyValueStore(store_path)
        second.set_item("a", "1")
        assert first.get_item("a") == "1"

    def test_remove_from_other_store(self, store_path: Path):
        first = KeyValueStore(store_path)
        second = KeyValueStore(store_path)
        first.set_item("a", "1")
        first.set_item("b", "2")
        second.remove_item("a")
        assert first.keys() == ["b"]
