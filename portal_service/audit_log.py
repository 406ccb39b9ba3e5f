"""
Audit logging for admin content mutations.

Entries are written after the mutation has committed. A failed audit write
is logged and reported, never raised, and never undoes the mutation.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .backend import BackendClient, BackendError
from .models.records import AuditAction, AuditLogEntry
from .models.results import TrackingResult

logger = logging.getLogger(__name__)

AUDIT_LOGS_TABLE = "audit_logs"
RECENT_LIMIT = 100


class AuditLogRecorder:
    def __init__(self, backend: BackendClient):
        self.backend = backend

    def log_action(self, access_token: Optional[str], action: Union[AuditAction, str],
                   table_name: str, record_id: Optional[str] = None,
                   old_values: Optional[Dict[str, Any]] = None,
                   new_values: Optional[Dict[str, Any]] = None) -> TrackingResult:
        """
        Record one admin action on behalf of the user owning ``access_token``.

        The actor is looked up on every call so a revoked session cannot keep
        writing entries.

        Args:
            access_token: Backend session token of the acting admin
            action: CREATE, UPDATE or DELETE
            table_name: Mutated table
            record_id: Id of the mutated row
            old_values: Row before the change (None for CREATE)
            new_values: Row after the change (None for DELETE)

        Returns:
            TrackingResult describing whether the entry was written
        """
        try:
            user = self.backend.get_user(access_token) if access_token else None
        except BackendError as e:
            logger.error(f"Error logging audit action: {e}")
            return TrackingResult.failure(str(e))

        if not user:
            logger.error("No user found for audit log")
            return TrackingResult.failure("no authenticated user")

        try:
            entry = AuditLogEntry(
                user_id=user["id"],
                user_email=user.get("email") or "",
                action=action,
                table_name=table_name,
                record_id=record_id,
                old_values=old_values,
                new_values=new_values,
            )
        except ValidationError as e:
            logger.error(f"Rejected audit entry for {action} on {table_name}: {e}")
            return TrackingResult.failure(str(e))

        try:
            self.backend.insert(AUDIT_LOGS_TABLE, entry.to_row())
        except BackendError as e:
            logger.error(f"Failed to create audit log: {e}")
            return TrackingResult.failure(str(e))

        logger.info(f"Audit: {entry.user_email} {entry.action.value} {table_name}/{record_id}")
        return TrackingResult.success()

    def recent(self, limit: int = RECENT_LIMIT) -> List[Dict[str, Any]]:
        """Latest entries first. Backend errors propagate to the admin view."""
        return self.backend.select(
            AUDIT_LOGS_TABLE, order="created_at", descending=True, limit=limit,
        )
