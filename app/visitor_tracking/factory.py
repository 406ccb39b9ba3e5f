"""
Factory for creating the visitor tracking module.
"""
from datetime import timedelta
from pathlib import Path
from typing import Iterable

from portal_service.backend import BackendClient
from .routes import create_visitor_tracking_blueprint
from .services import VisitorTrackingService


def create_visitor_tracking_module(
    backend: BackendClient,
    visitor_data_dir: Path,
    tracking_config,
    geolocation_config,
    tracked_blueprints: Iterable[str] = ("content_pages",),
) -> dict:
    """Create the visitor tracking module.

    Args:
        backend: Backend client receiving heartbeats, page views and view counts
        visitor_data_dir: Directory holding one state file per visitor session
        tracking_config: TrackingConfig section
        geolocation_config: GeolocationConfig section
        tracked_blueprints: Blueprints whose GET requests are page navigations

    Returns:
        Dictionary containing the service and blueprint
    """
    service = VisitorTrackingService(
        backend=backend,
        visitor_data_dir=visitor_data_dir,
        heartbeat_interval_seconds=tracking_config.heartbeat_interval_seconds,
        dedup_window=timedelta(hours=tracking_config.dedup_window_hours),
        geolocation_url=geolocation_config.url,
        geolocation_timeout=geolocation_config.timeout,
    )
    blueprint = create_visitor_tracking_blueprint(service, tracked_blueprints)

    return {
        "service": service,
        "blueprint": blueprint
    }
