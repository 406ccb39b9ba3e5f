"""
Key-value stores for per-visitor client state.

The browser keeps its session id and dedup maps in local storage; here the
same state lives behind a small KeyValueStore interface so it can be held in
memory (headless clients, tests) or in one JSON file per visitor (server).
"""

import json
import threading
from abc import ABC, abstractmethod
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional


class KeyValueStore(ABC):
    """Minimal local-storage style interface."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON file; missing or corrupt files read as empty."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (FileNotFoundError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)


class RecentlySeenMap:
    """
    Map of item key to the epoch-millisecond time it was last seen, kept
    under one key of a KeyValueStore.

    An item is fresh while less than ``window`` has elapsed since it was
    marked. Expired entries are dropped whenever the map is written.
    """

    def __init__(self, store: KeyValueStore, storage_key: str, window: timedelta):
        self.store = store
        self.storage_key = storage_key
        self.window_ms = int(window.total_seconds() * 1000)

    def _load(self) -> Dict[str, int]:
        raw = self.store.get(self.storage_key)
        if not isinstance(raw, dict):
            return {}
        return {
            key: value for key, value in raw.items()
            if isinstance(value, (int, float)) and not isinstance(value, bool)
        }

    def last_seen(self, item: str) -> Optional[int]:
        value = self._load().get(item)
        return int(value) if value is not None else None

    def is_fresh(self, item: str, now_ms: int) -> bool:
        last = self.last_seen(item)
        return last is not None and now_ms - last < self.window_ms

    def mark(self, item: str, now_ms: int) -> None:
        entries = {
            key: value for key, value in self._load().items()
            if now_ms - value < self.window_ms
        }
        entries[item] = now_ms
        self.store.set(self.storage_key, entries)
