"""
Data Models for Visitor Stats

Defines the data structures returned by the analytics dashboard.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DashboardOverview:
    """Headline numbers of the analytics dashboard."""

    active_visitors: int = 0
    total_views: int = 0
    most_visited_page: Optional[str] = None
    window_days: int = 7
    refetch_seconds: int = 5

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "active_visitors": self.active_visitors,
            "total_views": self.total_views,
            "most_visited_page": self.most_visited_page,
            "window_days": self.window_days,
            "refetch_seconds": self.refetch_seconds
        }


@dataclass
class DeviceBreakdown:
    """Device, browser and OS counts over the active visitors."""

    device_types: Dict[str, int] = field(default_factory=dict)
    devices: Dict[str, int] = field(default_factory=dict)
    browsers: Dict[str, int] = field(default_factory=dict)
    operating_systems: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_types": self.device_types,
            "devices": self.devices,
            "browsers": self.browsers,
            "operating_systems": self.operating_systems
        }


@dataclass
class MapPoint:
    """An active visitor with a known position."""

    latitude: float
    longitude: float
    city: Optional[str] = None
    country: Optional[str] = None
    ip_address: Optional[str] = None
    page_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.city,
            "country": self.country,
            "ip_address": self.ip_address,
            "page_path": self.page_path
        }

    @classmethod
    def from_visitor(cls, visitor: Dict[str, Any]) -> Optional["MapPoint"]:
        latitude, longitude = visitor.get("latitude"), visitor.get("longitude")
        numeric = (int, float)
        if not isinstance(latitude, numeric) or not isinstance(longitude, numeric):
            return None
        if isinstance(latitude, bool) or isinstance(longitude, bool):
            return None
        return cls(
            latitude=float(latitude),
            longitude=float(longitude),
            city=visitor.get("city"),
            country=visitor.get("country"),
            ip_address=visitor.get("ip_address"),
            page_path=visitor.get("page_path")
        )


@dataclass
class ChartPoint:
    """One bar or point of a dashboard chart."""

    label: str
    visits: int

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "visits": self.visits}


def chart(points: List[ChartPoint]) -> List[Dict[str, Any]]:
    return [point.to_dict() for point in points]
