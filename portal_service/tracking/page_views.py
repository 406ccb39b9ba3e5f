"""
Page view recording with a per-path 24 hour client-side dedup.

The dedup map lives in the visitor's own state store, so it is a heuristic:
a cleared store or a second device records the same path again.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..backend import BackendClient, BackendError
from ..kv_store import KeyValueStore, RecentlySeenMap
from ..models.records import PageViewEvent
from ..models.results import TrackingResult
from ..timeutils import to_epoch_ms, to_iso, utc_now

logger = logging.getLogger(__name__)

PAGE_VIEWS_TABLE = "page_views"
VIEWED_PAGES_KEY = "viewed_pages"
DEDUP_WINDOW = timedelta(hours=24)


class PageViewRecorder:
    def __init__(self, backend: BackendClient, store: KeyValueStore,
                 window: timedelta = DEDUP_WINDOW,
                 clock: Callable[[], datetime] = utc_now):
        self.backend = backend
        self.viewed = RecentlySeenMap(store, VIEWED_PAGES_KEY, window)
        self.clock = clock

    def record(self, session_id: str, page_path: str, referrer: Optional[str] = None,
               user_agent: Optional[str] = None) -> TrackingResult:
        now = self.clock()
        now_ms = to_epoch_ms(now)
        if self.viewed.is_fresh(page_path, now_ms):
            return TrackingResult.skip(f"{page_path} already recorded")

        event = PageViewEvent(
            session_id=session_id,
            page_path=page_path,
            referrer=referrer or None,
            user_agent=user_agent,
            visited_at=to_iso(now),
        )
        try:
            self.backend.insert(PAGE_VIEWS_TABLE, event.model_dump())
        except BackendError as e:
            logger.error(f"Error recording page view for {page_path}: {e}")
            return TrackingResult.failure(str(e))

        self.viewed.mark(page_path, now_ms)
        return TrackingResult.success()
