"""
Visitor tracking: session identity, heartbeats, page views, content views,
geolocation and User-Agent parsing.
"""

from .client import TrackingClient
from .content_views import ContentViewCounter
from .device_parser import parse_user_agent
from .geolocation import GeolocationResolver, backend_ip_lookup, is_public_ip
from .heartbeat import HeartbeatTimer, HeartbeatTracker, Visit
from .page_views import PageViewRecorder
from .session_identity import SESSION_ID_KEY, SessionIdentity, generate_session_id

__all__ = [
    "TrackingClient",
    "ContentViewCounter",
    "parse_user_agent",
    "GeolocationResolver",
    "backend_ip_lookup",
    "is_public_ip",
    "HeartbeatTimer",
    "HeartbeatTracker",
    "Visit",
    "PageViewRecorder",
    "SESSION_ID_KEY",
    "SessionIdentity",
    "generate_session_id",
]
