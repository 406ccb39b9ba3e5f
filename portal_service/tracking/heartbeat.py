"""
Visitor heartbeat tracking.

Each session owns one ``active_visitors`` row. Registering inserts it and
falls back to an update when the session already has a row; a repeating
timer then refreshes ``last_seen`` so readers can tell who is still around.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..backend import BackendClient, BackendError, eq
from ..models.records import ActiveVisitorRecord
from ..models.results import GeoLocation, TrackingResult
from ..timeutils import to_iso, utc_now

logger = logging.getLogger(__name__)

ACTIVE_VISITORS_TABLE = "active_visitors"
HEARTBEAT_INTERVAL_SECONDS = 60


@dataclass
class Visit:
    """What the heartbeat knows about the current page of a session."""
    session_id: str
    page_path: str
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    geolocation: GeoLocation = field(default_factory=GeoLocation)

    def to_record(self, last_seen: str) -> ActiveVisitorRecord:
        return ActiveVisitorRecord(
            session_id=self.session_id,
            page_path=self.page_path,
            user_agent=self.user_agent,
            referrer=self.referrer or None,
            last_seen=last_seen,
            **self.geolocation.to_dict(),
        )


class HeartbeatTimer:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], object]):
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="visitor-heartbeat", daemon=True)

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.callback()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    def is_alive(self) -> bool:
        return self._thread.is_alive()


TimerFactory = Callable[[float, Callable[[], object]], HeartbeatTimer]


class HeartbeatTracker:
    def __init__(self, backend: BackendClient,
                 interval_seconds: float = HEARTBEAT_INTERVAL_SECONDS,
                 clock: Callable[[], datetime] = utc_now,
                 timer_factory: TimerFactory = HeartbeatTimer):
        self.backend = backend
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.timer_factory = timer_factory
        self._timer: Optional[HeartbeatTimer] = None

    def register(self, visit: Visit) -> TrackingResult:
        """Upsert the session's row: insert, or update on a unique violation."""
        record = visit.to_record(to_iso(self.clock()))
        try:
            self.backend.insert(ACTIVE_VISITORS_TABLE, record.model_dump())
        except BackendError as e:
            if e.is_unique_violation:
                return self.refresh(visit.session_id, visit.page_path)
            logger.error(f"Error tracking visitor {visit.session_id}: {e}")
            return TrackingResult.failure(str(e))
        return TrackingResult.success()

    def refresh(self, session_id: str, page_path: str) -> TrackingResult:
        values = {"page_path": page_path, "last_seen": to_iso(self.clock())}
        try:
            self.backend.update(ACTIVE_VISITORS_TABLE, values, [eq("session_id", session_id)])
        except BackendError as e:
            logger.error(f"Error updating heartbeat for {session_id}: {e}")
            return TrackingResult.failure(str(e))
        return TrackingResult.success()

    def start(self, visit: Visit) -> TrackingResult:
        """Register now, then refresh on every interval until stopped."""
        self.stop()
        result = self.register(visit)
        self._timer = self.timer_factory(
            self.interval_seconds,
            lambda: self.refresh(visit.session_id, visit.page_path),
        )
        self._timer.start()
        return result

    def navigate(self, visit: Visit) -> TrackingResult:
        return self.start(visit)

    def stop(self) -> None:
        """Cancel the timer. The row stays and ages out of the active window."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def running(self) -> bool:
        return self._timer is not None
