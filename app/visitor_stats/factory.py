"""
Factory for creating visitor stats module.
"""
from portal_service.backend import BackendClient
from .services import VisitorStatsService
from .routes import create_visitor_stats_blueprint


def create_visitor_stats_module(
    backend: BackendClient,
    tracking_config,
    trending_config,
    admin_required,
    admin_path: str
) -> dict:
    """Create visitor stats module with service and routes.

    Args:
        backend: Backend client holding visitor and page view tables
        tracking_config: TrackingConfig section (active window)
        trending_config: TrendingConfig section (reporting window)
        admin_required: Decorator restricting routes to admins
        admin_path: Hidden admin prefix

    Returns:
        Dictionary containing the service and blueprint
    """
    visitor_stats_service = VisitorStatsService(
        backend,
        active_window_minutes=tracking_config.active_window_minutes,
        window_days=trending_config.window_days,
    )

    blueprint = create_visitor_stats_blueprint(
        visitor_stats_service=visitor_stats_service,
        admin_required=admin_required,
        admin_path=admin_path
    )

    return {
        "service": visitor_stats_service,
        "blueprint": blueprint
    }
