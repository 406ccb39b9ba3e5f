"""
Backend record models.

Pydantic models for the rows the portal writes to the hosted backend tables.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class ContentType(str, Enum):
    """Content tables whose items carry a view counter."""
    ARTICLES = "articles"
    JOBS = "jobs"
    MYTHS = "myths"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ActiveVisitorRecord(BaseModel):
    """One row per session in ``active_visitors``; refreshed by heartbeats."""
    session_id: str = Field(description="Client-generated session id (unique)")
    page_path: str = Field(description="Path the visitor is currently on")
    user_agent: Optional[str] = Field(default=None, description="Raw User-Agent header")
    referrer: Optional[str] = Field(default=None, description="Document referrer, if any")
    ip_address: Optional[str] = Field(default=None, description="Resolved client IP")
    country: Optional[str] = Field(default=None, description="Country name from geolocation")
    city: Optional[str] = Field(default=None, description="City from geolocation")
    latitude: Optional[float] = Field(default=None, description="Latitude from geolocation")
    longitude: Optional[float] = Field(default=None, description="Longitude from geolocation")
    last_seen: str = Field(description="Last heartbeat time (ISO format)")


class PageViewEvent(BaseModel):
    """Append-only row in ``page_views``."""
    session_id: str = Field(description="Session that viewed the page")
    page_path: str = Field(description="Viewed path")
    referrer: Optional[str] = Field(default=None, description="Document referrer, if any")
    user_agent: Optional[str] = Field(default=None, description="Raw User-Agent header")
    visited_at: str = Field(description="View time (ISO format)")


class AuditLogEntry(BaseModel):
    """
    Row in ``audit_logs`` describing one admin mutation.

    CREATE carries no old snapshot, DELETE carries no new snapshot and UPDATE
    carries both.
    """
    user_id: str = Field(description="Id of the acting admin")
    user_email: str = Field(default="", description="Email of the acting admin")
    action: AuditAction = Field(description="CREATE, UPDATE or DELETE")
    table_name: str = Field(description="Mutated table")
    record_id: Optional[str] = Field(default=None, description="Id of the mutated row")
    old_values: Optional[Dict[str, Any]] = Field(default=None, description="Row before the mutation")
    new_values: Optional[Dict[str, Any]] = Field(default=None, description="Row after the mutation")

    @model_validator(mode="after")
    def check_snapshots(self) -> "AuditLogEntry":
        if self.action == AuditAction.CREATE and self.old_values is not None:
            raise ValueError("CREATE entries must not carry old_values")
        if self.action == AuditAction.DELETE and self.new_values is not None:
            raise ValueError("DELETE entries must not carry new_values")
        if self.action == AuditAction.UPDATE and (self.old_values is None or self.new_values is None):
            raise ValueError("UPDATE entries need both old_values and new_values")
        return self

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class LoginAttempt(BaseModel):
    """Row in ``login_attempts``; read back by the ``is_rate_limited`` RPC."""
    email: str = Field(description="Normalized email that attempted to sign in")
    success: bool = Field(description="Whether the password sign-in succeeded")
