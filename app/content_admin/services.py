"""
Admin content mutations with audit logging.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from portal_service.audit_log import AuditLogRecorder
from portal_service.backend import BackendClient, eq
from portal_service.models.records import AuditAction, ContentType
from portal_service.models.results import TrackingResult
from app.content_pages.services import ORDER_COLUMNS
from .models import CONTENT_FORMS

logger = logging.getLogger(__name__)


class ContentNotFound(Exception):
    pass


@dataclass
class MutationResult:
    record: Optional[Dict[str, Any]]
    audit: TrackingResult

    def to_dict(self) -> Dict[str, Any]:
        return {"record": self.record, "audit": self.audit.to_dict()}


class ContentAdminService:
    """
    Create, update and delete content rows, then write the audit entry.

    Form validation errors (pydantic.ValidationError) and backend errors
    (BackendError) propagate before anything is written or audited.
    """

    def __init__(self, backend: BackendClient, audit_recorder: AuditLogRecorder):
        self.backend = backend
        self.audit_recorder = audit_recorder

    def list_items(self, content_type: ContentType) -> List[Dict[str, Any]]:
        return self.backend.select(content_type.value, order=ORDER_COLUMNS[content_type], descending=True)

    def _existing(self, content_type: ContentType, item_id: str) -> Dict[str, Any]:
        row = self.backend.select_one(content_type.value, [eq("id", item_id)])
        if row is None:
            raise ContentNotFound(f"{content_type.value}/{item_id} not found")
        return row

    def create(self, content_type: ContentType, data: Dict[str, Any], access_token: str) -> MutationResult:
        form = CONTENT_FORMS[content_type].model_validate(data)
        created = self.backend.insert(content_type.value, form.to_row())
        audit = self.audit_recorder.log_action(
            access_token, AuditAction.CREATE, content_type.value,
            record_id=created.get("id"), old_values=None, new_values=created,
        )
        return MutationResult(record=created, audit=audit)

    def update(self, content_type: ContentType, item_id: str, data: Dict[str, Any],
               access_token: str) -> MutationResult:
        form = CONTENT_FORMS[content_type].model_validate(data)
        before = self._existing(content_type, item_id)
        row = form.to_row()
        updated = self.backend.update(content_type.value, row, [eq("id", item_id)])
        after = updated[0] if updated else {**before, **row}
        audit = self.audit_recorder.log_action(
            access_token, AuditAction.UPDATE, content_type.value,
            record_id=item_id, old_values=before, new_values=row,
        )
        return MutationResult(record=after, audit=audit)

    def delete(self, content_type: ContentType, item_id: str, access_token: str) -> MutationResult:
        before = self._existing(content_type, item_id)
        self.backend.delete(content_type.value, [eq("id", item_id)])
        audit = self.audit_recorder.log_action(
            access_token, AuditAction.DELETE, content_type.value,
            record_id=item_id, old_values=before, new_values=None,
        )
        return MutationResult(record=None, audit=audit)
