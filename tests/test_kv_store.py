"""
Tests for client state stores and the recently-seen map.
"""
import json
from datetime import timedelta

from portal_service.kv_store import JsonFileStore, MemoryStore, RecentlySeenMap


class TestJsonFileStore:
    """One JSON file per visitor."""

    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "missing.json")
        assert store.get("anything") is None
        assert store.get("anything", "fallback") == "fallback"

    def test_set_creates_parent_directories(self, tmp_path):
        path = tmp_path / "visitors" / "abc.json"
        store = JsonFileStore(path)
        store.set("visitor_session_id", "123-abc")

        assert json.loads(path.read_text(encoding="utf-8")) == {"visitor_session_id": "123-abc"}

    def test_non_ascii_is_kept_readable(self, tmp_path):
        path = tmp_path / "state.json"
        JsonFileStore(path).set("city", "Tiranë")
        assert "Tiranë" in path.read_text(encoding="utf-8")

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        assert store.get("viewed_pages") is None
        store.set("viewed_pages", {})
        assert store.get("viewed_pages") == {}

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path / "state.json")
        store.set("a", 1)
        store.delete("a")
        store.delete("never-set")
        assert store.get("a") is None


class TestRecentlySeenMap:
    """TTL semantics of the dedup maps."""

    def test_fresh_within_window(self):
        seen = RecentlySeenMap(MemoryStore(), "viewed_pages", timedelta(hours=24))
        seen.mark("/jobs", 1_000)

        assert seen.is_fresh("/jobs", 1_000 + 24 * 3600 * 1000 - 1)
        assert not seen.is_fresh("/jobs", 1_000 + 24 * 3600 * 1000)
        assert not seen.is_fresh("/health", 1_000)

    def test_corrupt_payload_is_empty(self):
        store = MemoryStore({"viewed_pages": "garbage"})
        seen = RecentlySeenMap(store, "viewed_pages", timedelta(hours=24))

        assert not seen.is_fresh("/jobs", 0)
        seen.mark("/jobs", 5)
        assert store.get("viewed_pages") == {"/jobs": 5}

    def test_non_numeric_entries_are_ignored(self):
        store = MemoryStore({"viewed_pages": {"/jobs": "yesterday", "/health": 10}})
        seen = RecentlySeenMap(store, "viewed_pages", timedelta(hours=1))

        assert seen.last_seen("/jobs") is None
        assert seen.last_seen("/health") == 10

    def test_mark_drops_expired_entries(self):
        store = MemoryStore()
        seen = RecentlySeenMap(store, "viewed_content", timedelta(seconds=10))
        seen.mark("jobs:a", 0)
        seen.mark("jobs:b", 20_000)

        assert store.get("viewed_content") == {"jobs:b": 20_000}

    def test_maps_are_independent(self):
        store = MemoryStore()
        pages = RecentlySeenMap(store, "viewed_pages", timedelta(hours=24))
        content = RecentlySeenMap(store, "viewed_content", timedelta(hours=24))
        pages.mark("/jobs/a", 100)

        assert not content.is_fresh("/jobs/a", 100)
