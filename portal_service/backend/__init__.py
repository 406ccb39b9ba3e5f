"""
Backend clients for the hosted database, RPCs, functions and auth.
"""

import logging
from typing import Optional

from ..change_feed import ChangeFeed
from .base import UNIQUE_VIOLATION, BackendClient, BackendError, Filter, eq, gte, lt
from .memory import MemoryBackend
from .supabase import SupabaseBackend

logger = logging.getLogger(__name__)


def build_backend(provider: str, url: str = "", api_key: str = "", timeout: float = 10.0,
                  change_feed: Optional[ChangeFeed] = None) -> BackendClient:
    """
    Create the configured backend client.

    Args:
        provider: ``supabase`` or ``memory``
        url: Project URL (supabase only)
        api_key: Service or anon key (supabase only)
        timeout: Per-request timeout in seconds
        change_feed: Channel that receives change events for every write
    """
    provider = (provider or "memory").lower()
    if provider == "supabase":
        logger.info(f"Using Supabase backend at {url}")
        return SupabaseBackend(url, api_key, timeout=timeout, change_feed=change_feed)
    if provider == "memory":
        logger.info("Using in-memory backend; data is lost on restart")
        return MemoryBackend(change_feed=change_feed)
    raise ValueError(f"Unknown backend provider: {provider}")


__all__ = [
    "UNIQUE_VIOLATION",
    "BackendClient",
    "BackendError",
    "Filter",
    "MemoryBackend",
    "SupabaseBackend",
    "build_backend",
    "eq",
    "gte",
    "lt",
]
