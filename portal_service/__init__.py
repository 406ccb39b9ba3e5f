"""
Portal Service Package

Visitor tracking, trending inputs, audit logging and email verification for
the bilingual jobs / health / myths portal, on top of a hosted backend.
"""

from .audit_log import AuditLogRecorder
from .backend import BackendClient, BackendError, MemoryBackend, SupabaseBackend, build_backend
from .change_feed import ChangeEvent, ChangeFeed, ChangeKind
from .email_verification import EmailVerificationClient, validate_email
from .kv_store import JsonFileStore, KeyValueStore, MemoryStore, RecentlySeenMap
from .tracking import TrackingClient, parse_user_agent

__all__ = [
    "AuditLogRecorder",
    "BackendClient",
    "BackendError",
    "MemoryBackend",
    "SupabaseBackend",
    "build_backend",
    "ChangeEvent",
    "ChangeFeed",
    "ChangeKind",
    "EmailVerificationClient",
    "validate_email",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "RecentlySeenMap",
    "TrackingClient",
    "parse_user_agent",
]
