"""
Factory for creating user management module.
"""
from typing import Optional

from portal_service.backend import BackendClient
from portal_service.email_verification import EmailVerificationClient
from .routes import create_user_routes
from .services import AdminAuthService


def create_user_management_module(
    backend: BackendClient,
    admin_path: str,
    email_verifier: Optional[EmailVerificationClient] = None,
    default_language: str = "sq"
) -> dict:
    """Create user management module with service and routes.

    Args:
        backend: Backend client providing auth, roles and login attempts
        admin_path: Hidden admin panel path users are sent to after login
        email_verifier: Remote email verification; skipped when None
        default_language: Language for messages when none is requested

    Returns:
        Dictionary containing the service and blueprint
    """
    auth_service = AdminAuthService(backend, admin_path, email_verifier)
    blueprint = create_user_routes(auth_service, default_language)

    return {
        "service": auth_service,
        "blueprint": blueprint
    }
