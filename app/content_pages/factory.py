"""
Factory for creating the public content pages module.
"""
from portal_service.backend import BackendClient
from .routes import create_content_pages_blueprint
from .services import ContentService


def create_content_pages_module(backend: BackendClient, tracking_service, default_language: str = "sq") -> dict:
    """Create the content pages module.

    Args:
        backend: Backend client holding the content tables
        tracking_service: VisitorTrackingService used for content view counts
        default_language: Language used when ``?lang`` is missing or unknown

    Returns:
        Dictionary containing the service and blueprint
    """
    service = ContentService(backend)
    blueprint = create_content_pages_blueprint(service, tracking_service, default_language)

    return {
        "service": service,
        "blueprint": blueprint
    }
