"""
Content view counting.

Each article, job or myth has a ``views`` column incremented by a privileged
RPC. A view is counted at most once per item per 24 hours per client store.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Union

from ..backend import BackendClient, BackendError
from ..kv_store import KeyValueStore, RecentlySeenMap
from ..models.records import ContentType
from ..models.results import TrackingResult
from ..timeutils import to_epoch_ms, utc_now

logger = logging.getLogger(__name__)

VIEWED_CONTENT_KEY = "viewed_content"
DEDUP_WINDOW = timedelta(hours=24)

VIEW_COUNTER_RPCS = {
    ContentType.ARTICLES: ("increment_article_views", "article_id"),
    ContentType.JOBS: ("increment_job_views", "job_id"),
    ContentType.MYTHS: ("increment_myth_views", "myth_id"),
}


class ContentViewCounter:
    def __init__(self, backend: BackendClient, store: KeyValueStore,
                 window: timedelta = DEDUP_WINDOW,
                 clock: Callable[[], datetime] = utc_now):
        self.backend = backend
        self.viewed = RecentlySeenMap(store, VIEWED_CONTENT_KEY, window)
        self.clock = clock

    def increment(self, content_type: Union[ContentType, str], content_id: str) -> TrackingResult:
        """
        Count one view of a content item.

        Raises:
            ValueError: If ``content_type`` is not articles, jobs or myths
        """
        content_type = ContentType(content_type)
        if not content_id:
            return TrackingResult.skip("missing content id")

        key = f"{content_type.value}:{content_id}"
        now_ms = to_epoch_ms(self.clock())
        if self.viewed.is_fresh(key, now_ms):
            return TrackingResult.skip(f"{key} already counted")

        function_name, param = VIEW_COUNTER_RPCS[content_type]
        try:
            self.backend.rpc(function_name, {param: content_id})
        except BackendError as e:
            logger.error(f"Error incrementing views for {key}: {e}")
            return TrackingResult.failure(str(e))

        self.viewed.mark(key, now_ms)
        return TrackingResult.success()
