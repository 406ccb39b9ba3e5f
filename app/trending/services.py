"""
Trending service ranking content items by recent page views.
"""
import logging
import re
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from portal_service.backend import BackendClient, eq, gte
from portal_service.i18n import pick
from portal_service.models.records import ContentType
from portal_service.models.results import TrendingItem
from portal_service.timeutils import to_iso, utc_now

logger = logging.getLogger(__name__)

PATH_PATTERNS = [
    (re.compile(r"^/health/([a-f0-9-]+)$"), ContentType.ARTICLES),
    (re.compile(r"^/jobs/([a-f0-9-]+)$"), ContentType.JOBS),
    (re.compile(r"^/myths/([a-f0-9-]+)$"), ContentType.MYTHS),
]


def classify_path(page_path: str) -> Optional[Tuple[ContentType, str]]:
    """Map a detail page path to ``(content type, id)``; None for other pages."""
    for pattern, content_type in PATH_PATTERNS:
        match = pattern.match(page_path or "")
        if match:
            return content_type, match.group(1)
    return None


def item_title(content_type: ContentType, record: Dict, lang: str) -> str:
    if content_type == ContentType.JOBS:
        position = pick(record.get("position_sq"), record.get("position_en"), lang)
        return f"{position} - {record.get('business_name')}"
    if content_type == ContentType.MYTHS:
        return pick(record.get("claim_sq"), record.get("claim_en"), lang)
    return pick(record.get("title_sq"), record.get("title_en"), lang)


class TrendingService:
    """Counts detail-page views in a trailing window and resolves their titles.

    Results are recomputed on every call.
    """

    def __init__(self, backend: BackendClient, window_days: int = 7,
                 clock: Callable[[], datetime] = utc_now):
        self.backend = backend
        self.window_days = window_days
        self.clock = clock

    def count_views(self) -> Counter:
        since = self.clock() - timedelta(days=self.window_days)
        rows = self.backend.select(
            "page_views", columns="page_path", filters=[gte("visited_at", to_iso(since))],
        )
        counts = Counter()
        for row in rows:
            classified = classify_path(row.get("page_path"))
            if classified:
                counts[classified] += 1
        return counts

    def get_trending(self, lang: str = "sq", limit: int = 10) -> List[TrendingItem]:
        """
        Get the most viewed content items of the window.

        Args:
            lang: Title language, ``sq`` or ``en``
            limit: Maximum number of items

        Returns:
            Items sorted by views descending; equal counts keep first-seen order.
            Items deleted since they were viewed are skipped.
        """
        # Counter.most_common is a stable sort, so ties stay in insertion order.
        ranked = self.count_views().most_common(limit)

        items = []
        for (content_type, item_id), views in ranked:
            record = self.backend.select_one(content_type.value, [eq("id", item_id)])
            if record is None:
                logger.debug(f"Trending item {content_type.value}/{item_id} no longer exists")
                continue
            items.append(TrendingItem(
                id=item_id,
                type=content_type.value,
                title=item_title(content_type, record, lang),
                views=views,
            ))
        return items
