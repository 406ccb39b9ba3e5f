"""
Server-side visitor tracking.

Every visitor gets a session cookie and a small JSON state file under the
visitor data directory holding the same client state a browser tab keeps:
the dedup maps and the cached geolocation.
"""

import hashlib
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import requests
from flask import g, request

from portal_service.backend import BackendClient
from portal_service.kv_store import JsonFileStore, KeyValueStore
from portal_service.models.results import GeoLocation, TrackingResult
from portal_service.timeutils import to_epoch_ms, utc_now
from portal_service.tracking import (
    ContentViewCounter,
    GeolocationResolver,
    HeartbeatTracker,
    PageViewRecorder,
    Visit,
)

logger = logging.getLogger(__name__)

GEOLOCATION_KEY = "geolocation"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 365 * 3  # 3 years


class RequestCookieStore(KeyValueStore):
    """Cookie-backed store: reads the request, queues writes for the response."""

    def _pending(self) -> Dict[str, Optional[str]]:
        return g.setdefault("pending_cookies", {})

    def get(self, key: str, default: Any = None) -> Any:
        pending = self._pending()
        if key in pending:
            return pending[key] if pending[key] is not None else default
        return request.cookies.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._pending()[key] = str(value)

    def delete(self, key: str) -> None:
        self._pending()[key] = None


def apply_pending_cookies(response):
    """Write cookies queued by RequestCookieStore onto ``response``."""
    for key, value in g.get("pending_cookies", {}).items():
        if value is None:
            response.delete_cookie(key)
        else:
            response.set_cookie(key, value, max_age=SESSION_COOKIE_MAX_AGE, samesite="Lax")
    return response


class VisitorTrackingService:
    """Runs the tracking pipeline for requests served by the portal."""

    def __init__(self, backend: BackendClient, visitor_data_dir: Path,
                 heartbeat_interval_seconds: int = 60,
                 dedup_window: timedelta = timedelta(hours=24),
                 geolocation_url: str = "https://ipapi.co",
                 geolocation_timeout: float = 5.0,
                 clock: Callable[[], datetime] = utc_now,
                 http_session: Optional[requests.Session] = None):
        self.backend = backend
        self.visitor_data_dir = Path(visitor_data_dir)
        self.dedup_window = dedup_window
        self.geolocation_url = geolocation_url
        self.geolocation_timeout = geolocation_timeout
        self.clock = clock
        self.http_session = http_session or requests.Session()
        self.heartbeat = HeartbeatTracker(backend, heartbeat_interval_seconds, clock)

    def visitor_store(self, session_id: str) -> JsonFileStore:
        """State file for a session; the id is hashed so any cookie value is a safe name."""
        digest = hashlib.sha256(session_id.encode("utf-8")).hexdigest()[:32]
        return JsonFileStore(self.visitor_data_dir / f"{digest}.json")

    def get_client_ip(self) -> Optional[str]:
        """Client IP as resolved by ProxyFix from the trusted proxy hop."""
        return request.remote_addr

    def resolve_geolocation(self, store: KeyValueStore, ip: Optional[str]) -> GeoLocation:
        """Geolocation cached in the visitor state for one dedup window."""
        now_ms = to_epoch_ms(self.clock())
        window_ms = int(self.dedup_window.total_seconds() * 1000)
        cached = store.get(GEOLOCATION_KEY)
        if isinstance(cached, dict) and isinstance(cached.get("resolved_at"), (int, float)):
            if now_ms - cached["resolved_at"] < window_ms:
                return GeoLocation.from_dict(cached.get("location"))

        resolver = GeolocationResolver(
            lambda: ip,
            service_url=self.geolocation_url,
            timeout=self.geolocation_timeout,
            session=self.http_session,
        )
        location = resolver.resolve()
        store.set(GEOLOCATION_KEY, {"resolved_at": now_ms, "location": location.to_dict()})
        return location

    def track_page(self, session_id: str, page_path: str, referrer: Optional[str],
                   user_agent: Optional[str], ip: Optional[str]) -> Dict[str, TrackingResult]:
        """Register the heartbeat and record a page view for one page request."""
        store = self.visitor_store(session_id)
        try:
            location = self.resolve_geolocation(store, ip)
            visit = Visit(
                session_id=session_id,
                page_path=page_path,
                user_agent=user_agent,
                referrer=referrer,
                geolocation=location,
            )
            heartbeat = self.heartbeat.register(visit)
            recorder = PageViewRecorder(self.backend, store, self.dedup_window, self.clock)
            page_view = recorder.record(session_id, page_path, referrer, user_agent)
        except OSError as e:
            logger.error(f"Visitor state unavailable for {session_id}: {e}")
            failure = TrackingResult.failure(str(e))
            return {"heartbeat": failure, "page_view": failure}
        return {"heartbeat": heartbeat, "page_view": page_view}

    def refresh_heartbeat(self, session_id: str, page_path: str) -> TrackingResult:
        return self.heartbeat.refresh(session_id, page_path)

    def track_content_view(self, session_id: str, content_type: str, content_id: str) -> TrackingResult:
        counter = ContentViewCounter(self.backend, self.visitor_store(session_id), self.dedup_window, self.clock)
        try:
            return counter.increment(content_type, content_id)
        except OSError as e:
            logger.error(f"Visitor state unavailable for {session_id}: {e}")
            return TrackingResult.failure(str(e))
