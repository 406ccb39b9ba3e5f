"""
Models package for portal records and operation results.
"""

from .records import (
    ActiveVisitorRecord,
    AuditAction,
    AuditLogEntry,
    ContentType,
    LoginAttempt,
    PageViewEvent,
)

from .results import (
    DeviceInfo,
    EmailVerificationResult,
    GeoLocation,
    TrackingResult,
    TrendingItem,
)

__all__ = [
    "ActiveVisitorRecord",
    "AuditAction",
    "AuditLogEntry",
    "ContentType",
    "LoginAttempt",
    "PageViewEvent",
    "DeviceInfo",
    "EmailVerificationResult",
    "GeoLocation",
    "TrackingResult",
    "TrendingItem",
]
