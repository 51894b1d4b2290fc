"""Tests for persistence stores.

Each store is tested for:
  1. load on non-existent file returns correct default
  2. save then load round-trips correctly
  3. load on corrupt JSON returns default (graceful degradation)
  4. Store-specific features
"""

from __future__ import annotations

import json

from mdtabs.persistence import FileHistoryStore, KeyValueStore, MemoryStore
from mdtabs.persistence._base import JsonStore


# ---------------------------------------------------------------------------
# Base JsonStore
# ---------------------------------------------------------------------------


class TestJsonStore:
    def test_load_raw_nonexistent(self, tmp_path):
        store = JsonStore(tmp_path / "nope.json")
        assert store.load_raw() == {}

    def test_save_and_load_raw_dict(self, tmp_path):
        store = JsonStore(tmp_path / "data.json")
        store.save_raw({"key": "value"})
        assert store.load_raw() == {"key": "value"}

    def test_load_raw_corrupt_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not valid json{{{")
        assert JsonStore(path).load_raw() == {}

    def test_wrong_top_level_type_returns_default(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        assert JsonStore(path).load_raw() == {}

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "deep" / "nested" / "store.json"
        store = JsonStore(path)
        store.save_raw({"a": 1})
        assert path.exists()
        assert store.load_raw() == {"a": 1}

    def test_save_leaves_no_temp_file(self, tmp_path):
        path = tmp_path / "store.json"
        JsonStore(path).save_raw({"a": 1})
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]


# ---------------------------------------------------------------------------
# KeyValueStore
# ---------------------------------------------------------------------------


class TestKeyValueStore:
    def test_get_missing(self, tmp_path):
        assert KeyValueStore(tmp_path / "state.json").get("mdtabs.tabs") is None

    def test_round_trip(self, tmp_path):
        store = KeyValueStore(tmp_path / "state.json")
        store.set("mdtabs.tabs", '{"tabs": []}')
        assert KeyValueStore(tmp_path / "state.json").get("mdtabs.tabs") == '{"tabs": []}'

    def test_values_kept_verbatim(self, tmp_path):
        store = KeyValueStore(tmp_path / "state.json")
        store.set("k", "{not json")
        assert store.get("k") == "{not json"

    def test_non_string_value_returned_verbatim(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"k": {"nested": True}}))
        assert KeyValueStore(path).get("k") == {"nested": True}

    def test_delete(self, tmp_path):
        store = KeyValueStore(tmp_path / "state.json")
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        store.delete("missing")
        assert store.keys() == ["b"]

    def test_save_sorts_keys(self, tmp_path):
        path = tmp_path / "state.json"
        store = KeyValueStore(path)
        store.set("zzz", "last")
        store.set("aaa", "first")
        keys = list(json.loads(path.read_text()).keys())
        assert keys == sorted(keys)

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("corrupt!!!{")
        store = KeyValueStore(path)
        assert store.get("mdtabs.tabs") is None
        store.set("mdtabs.tabs", "{}")
        assert store.get("mdtabs.tabs") == "{}"


class TestMemoryStore:
    def test_basic_operations(self):
        store = MemoryStore({"a": "1"})
        store.set("b", "2")
        store.delete("a")
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == "2"


# ---------------------------------------------------------------------------
# FileHistoryStore
# ---------------------------------------------------------------------------


class TestFileHistoryStore:
    def test_load_empty(self, tmp_path):
        assert FileHistoryStore(tmp_path / "history.json").load() == []

    def test_most_recent_first(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history.json")
        store.add("/docs/a.md")
        store.add("/docs/b.md")
        assert [e["path"] for e in store.load()] == ["/docs/b.md", "/docs/a.md"]

    def test_reopening_moves_to_front_without_duplicates(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history.json")
        store.add("/docs/a.md")
        store.add("/docs/b.md")
        store.add("/docs/a.md")
        assert [e["path"] for e in store.load()] == ["/docs/a.md", "/docs/b.md"]

    def test_limited_to_three(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history.json")
        for name in "abcd":
            store.add(f"/docs/{name}.md")
        assert [e["name"] for e in store.load()] == ["d.md", "c.md", "b.md"]

    def test_entry_fields(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history.json")
        entry = store.add("/docs/a.md")[0]
        assert entry["path"] == "/docs/a.md"
        assert entry["name"] == "a.md"
        assert "T" in entry["date"]

    def test_malformed_entries_skipped(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps([{"path": "/ok.md"}, "junk", {"name": "x"}]))
        assert FileHistoryStore(path).load() == [{"path": "/ok.md"}]

    def test_clear(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history.json")
        store.add("/docs/a.md")
        store.clear()
        assert store.load() == []
