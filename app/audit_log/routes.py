"""
Audit log viewer routes.
"""
import logging

from flask import Blueprint, jsonify, request

from portal_service.audit_log import RECENT_LIMIT, AuditLogRecorder
from portal_service.backend import BackendError

logger = logging.getLogger(__name__)


def create_audit_log_blueprint(recorder: AuditLogRecorder, admin_required, admin_path: str) -> Blueprint:
    """Create the audit log viewer blueprint."""
    bp = Blueprint('audit_log', __name__, url_prefix=f"{admin_path}/api/audit-logs")

    @bp.route('', methods=['GET'])
    @admin_required
    def list_audit_logs():
        """Latest audit entries, newest first (at most 100)."""
        limit = max(1, min(request.args.get('limit', RECENT_LIMIT, type=int), RECENT_LIMIT))
        try:
            entries = recorder.recent(limit)
        except BackendError as e:
            logger.error(f"Could not load audit logs: {e}")
            return jsonify({"error": e.message}), 502
        return jsonify({"entries": entries, "count": len(entries)})

    return bp
