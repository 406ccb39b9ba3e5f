"""
Factory for creating the admin content module.
"""
from portal_service.audit_log import AuditLogRecorder
from portal_service.backend import BackendClient
from .routes import create_content_admin_blueprint
from .services import ContentAdminService


def create_content_admin_module(backend: BackendClient, audit_recorder: AuditLogRecorder,
                                admin_required, admin_path: str) -> dict:
    """Create the admin content module.

    Returns:
        Dictionary containing the service and blueprint
    """
    service = ContentAdminService(backend, audit_recorder)
    blueprint = create_content_admin_blueprint(service, admin_required, admin_path)

    return {
        "service": service,
        "blueprint": blueprint
    }
