"""
Factory for creating the audit log module.
"""
from portal_service.audit_log import AuditLogRecorder
from portal_service.backend import BackendClient
from .routes import create_audit_log_blueprint


def create_audit_log_module(backend: BackendClient, admin_required, admin_path: str) -> dict:
    """Create the audit log module.

    Returns:
        Dictionary containing the recorder (as service) and blueprint
    """
    recorder = AuditLogRecorder(backend)
    blueprint = create_audit_log_blueprint(recorder, admin_required, admin_path)

    return {
        "service": recorder,
        "blueprint": blueprint
    }
