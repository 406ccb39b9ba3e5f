"""
Visitor Stats Service

Analytics for the admin dashboard, computed from the ``active_visitors`` and
``page_views`` tables.
"""

import logging
import threading
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from portal_service.backend import BackendClient, gte
from portal_service.change_feed import ChangeEvent
from portal_service.timeutils import parse_iso, to_iso, utc_now
from portal_service.tracking import parse_user_agent

from .models import ChartPoint, DashboardOverview, DeviceBreakdown, MapPoint

logger = logging.getLogger(__name__)

ACTIVE_VISITORS_TABLE = "active_visitors"
PAGE_VIEWS_TABLE = "page_views"


class VisitorStatsService:
    """Service for computing visitor statistics.

    The active visitor list is cached for ``refetch_seconds`` and dropped as
    soon as the change feed reports a write to ``active_visitors``.
    """

    def __init__(self, backend: BackendClient, active_window_minutes: int = 5,
                 window_days: int = 7, refetch_seconds: int = 5,
                 clock: Callable[[], datetime] = utc_now):
        self.backend = backend
        self.active_window = timedelta(minutes=active_window_minutes)
        self.window_days = window_days
        self.refetch_seconds = refetch_seconds
        self.clock = clock
        self._active_cache: Optional[Tuple[datetime, List[Dict[str, Any]]]] = None
        self._generation = 0
        self._lock = threading.Lock()
        self._unsubscribe = backend.change_feed.subscribe(ACTIVE_VISITORS_TABLE, self._on_visitor_change)

    def _on_visitor_change(self, event: ChangeEvent) -> None:
        with self._lock:
            self._active_cache = None
            self._generation += 1

    def close(self) -> None:
        self._unsubscribe()

    def _page_views_since(self, since: datetime, columns: str) -> List[Dict[str, Any]]:
        return self.backend.select(PAGE_VIEWS_TABLE, columns=columns, filters=[gte("visited_at", to_iso(since))])

    def get_active_visitors(self) -> List[Dict[str, Any]]:
        """Visitors with a heartbeat inside the active window, newest first, with parsed device info."""
        now = self.clock()
        with self._lock:
            if self._active_cache and (now - self._active_cache[0]).total_seconds() < self.refetch_seconds:
                return list(self._active_cache[1])
            generation = self._generation

        since = now - self.active_window
        rows = self.backend.select(
            ACTIVE_VISITORS_TABLE,
            filters=[gte("last_seen", to_iso(since))],
            order="last_seen",
            descending=True,
        )
        visitors = []
        for row in rows:
            last_seen = parse_iso(row.get("last_seen"))
            if last_seen is None or last_seen < since:
                continue
            visitor = dict(row)
            visitor["device"] = parse_user_agent(row.get("user_agent")).to_dict()
            visitors.append(visitor)

        with self._lock:
            # A change seen during the fetch means these rows may already be stale.
            if self._generation == generation:
                self._active_cache = (now, visitors)
        return list(visitors)

    def get_active_count(self) -> int:
        return len(self.get_active_visitors())

    def get_visitor_trends(self) -> List[ChartPoint]:
        """Page views per UTC day over the window, oldest day first."""
        since = self.clock() - timedelta(days=self.window_days)
        per_day = Counter()
        for row in self._page_views_since(since, "visited_at"):
            visited = parse_iso(row.get("visited_at"))
            if visited is not None:
                per_day[visited.date()] += 1
        return [
            ChartPoint(label=day.strftime("%b %d"), visits=count)
            for day, count in sorted(per_day.items())
        ]

    def get_peak_hours(self) -> List[ChartPoint]:
        """Page views per UTC hour of day over the last 24 hours."""
        since = self.clock() - timedelta(days=1)
        per_hour = Counter()
        for row in self._page_views_since(since, "visited_at"):
            visited = parse_iso(row.get("visited_at"))
            if visited is not None:
                per_hour[visited.hour] += 1
        return [ChartPoint(label=f"{hour}:00", visits=per_hour.get(hour, 0)) for hour in range(24)]

    def get_top_pages(self, limit: int = 10) -> List[Dict[str, Any]]:
        since = self.clock() - timedelta(days=self.window_days)
        counts = Counter(row.get("page_path") for row in self._page_views_since(since, "page_path"))
        return [{"path": path, "visits": visits} for path, visits in counts.most_common(limit)]

    def get_overview(self) -> DashboardOverview:
        top_pages = self.get_top_pages()
        return DashboardOverview(
            active_visitors=self.get_active_count(),
            total_views=sum(point.visits for point in self.get_visitor_trends()),
            most_visited_page=top_pages[0]["path"] if top_pages else None,
            window_days=self.window_days,
            refetch_seconds=self.refetch_seconds,
        )

    def get_device_stats(self) -> DeviceBreakdown:
        """Get device, browser and OS statistics of the active visitors."""
        device_types, devices, browsers, systems = Counter(), Counter(), Counter(), Counter()
        for visitor in self.get_active_visitors():
            device = visitor["device"]
            device_types[device["device_type"]] += 1
            devices[device["device"]] += 1
            browsers[device["browser"]] += 1
            systems[device["os"]] += 1
        return DeviceBreakdown(
            device_types=dict(device_types.most_common()),
            devices=dict(devices.most_common()),
            browsers=dict(browsers.most_common()),
            operating_systems=dict(systems.most_common()),
        )

    def get_map_points(self) -> List[MapPoint]:
        points = []
        for visitor in self.get_active_visitors():
            point = MapPoint.from_visitor(visitor)
            if point is not None:
                points.append(point)
        return points
