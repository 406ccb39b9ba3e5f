"""
Factory for creating the trending module.
"""
from portal_service.backend import BackendClient
from .services import TrendingService
from .routes import create_trending_routes


def create_trending_module(backend: BackendClient, trending_config, admin_required, admin_path: str) -> dict:
    """
    Create the trending module with all its components.

    Args:
        backend: Backend client holding page views and content tables
        trending_config: TrendingConfig section
        admin_required: Decorator restricting routes to admins
        admin_path: Hidden admin prefix the API is mounted under

    Returns:
        Dictionary containing:
            - service: TrendingService instance
            - blueprint: Flask blueprint for routes
    """
    service = TrendingService(backend, window_days=trending_config.window_days)
    blueprint = create_trending_routes(
        service,
        admin_required,
        url_prefix=f"{admin_path}/api/trending",
        default_limit=trending_config.limit,
        refresh_seconds=trending_config.refresh_seconds,
    )

    return {
        "service": service,
        "blueprint": blueprint
    }
