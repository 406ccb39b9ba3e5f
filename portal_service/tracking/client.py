"""
Per-browser tracking orchestration.

A TrackingClient plays the part of one browser tab: it owns a client state
store, a session id, a heartbeat timer and both dedup maps. Geolocation is
resolved once, on the first navigation.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Union

from ..backend import BackendClient
from ..kv_store import KeyValueStore, MemoryStore
from ..models.records import ContentType
from ..models.results import GeoLocation, TrackingResult
from ..timeutils import utc_now
from .content_views import ContentViewCounter
from .geolocation import GeolocationResolver
from .heartbeat import HEARTBEAT_INTERVAL_SECONDS, HeartbeatTimer, HeartbeatTracker, TimerFactory, Visit
from .page_views import DEDUP_WINDOW, PageViewRecorder
from .session_identity import SessionIdentity

logger = logging.getLogger(__name__)


class TrackingClient:
    def __init__(self, backend: BackendClient, store: Optional[KeyValueStore] = None,
                 user_agent: Optional[str] = None,
                 geolocation_resolver: Optional[GeolocationResolver] = None,
                 heartbeat_interval: float = HEARTBEAT_INTERVAL_SECONDS,
                 dedup_window: timedelta = DEDUP_WINDOW,
                 clock: Callable[[], datetime] = utc_now,
                 timer_factory: TimerFactory = HeartbeatTimer):
        self.store = store if store is not None else MemoryStore()
        self.user_agent = user_agent
        self.geolocation_resolver = geolocation_resolver
        self.session_id = SessionIdentity(self.store, clock).get_or_create()
        self.heartbeat = HeartbeatTracker(backend, heartbeat_interval, clock, timer_factory)
        self.page_views = PageViewRecorder(backend, self.store, dedup_window, clock)
        self.content_views = ContentViewCounter(backend, self.store, dedup_window, clock)
        self._geolocation: Optional[GeoLocation] = None

    @property
    def geolocation(self) -> GeoLocation:
        if self._geolocation is None:
            if self.geolocation_resolver is None:
                self._geolocation = GeoLocation()
            else:
                self._geolocation = self.geolocation_resolver.resolve()
        return self._geolocation

    def navigate(self, page_path: str, referrer: Optional[str] = None) -> Dict[str, TrackingResult]:
        """
        Track arrival on ``page_path``: restart the heartbeat for the new path
        and record a page view. The two writes are independent.
        """
        visit = Visit(
            session_id=self.session_id,
            page_path=page_path,
            user_agent=self.user_agent,
            referrer=referrer,
            geolocation=self.geolocation,
        )
        return {
            "heartbeat": self.heartbeat.navigate(visit),
            "page_view": self.page_views.record(self.session_id, page_path, referrer, self.user_agent),
        }

    def view_content(self, content_type: Union[ContentType, str], content_id: str) -> TrackingResult:
        return self.content_views.increment(content_type, content_id)

    def close(self) -> None:
        self.heartbeat.stop()

    def __enter__(self) -> "TrackingClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
