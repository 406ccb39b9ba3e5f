"""
In-process change notifications.

Backend clients publish a ChangeEvent after every successful write; readers
such as the analytics dashboard subscribe per table to refresh early instead
of waiting for their next poll.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List

from .timeutils import to_iso, utc_now

logger = logging.getLogger(__name__)

ALL_TABLES = "*"


class ChangeKind(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    kind: ChangeKind
    record: Dict[str, Any]
    occurred_at: str = field(default_factory=lambda: to_iso(utc_now()))


Subscriber = Callable[[ChangeEvent], None]


class ChangeFeed:
    """Thread-safe publish/subscribe channel keyed by table name."""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, table: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for changes on ``table`` (``"*"`` for every table).

        Returns:
            A function that removes the subscription; calling it twice is harmless.
        """
        with self._lock:
            self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(table, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            callbacks = list(self._subscribers.get(event.table, []))
            callbacks.extend(self._subscribers.get(ALL_TABLES, []))

        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Change subscriber failed for {event.kind.value} on {event.table}")

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscribers.get(table, []))
