"""
Visitor Stats Routes

Admin-only JSON endpoints of the analytics dashboard.
"""

import logging

from flask import Blueprint, jsonify, request

from portal_service.backend import BackendError
from .models import chart
from .services import VisitorStatsService

logger = logging.getLogger(__name__)


def create_visitor_stats_blueprint(
    visitor_stats_service: VisitorStatsService,
    admin_required,
    admin_path: str
) -> Blueprint:
    """Create visitor stats blueprint with routes.

    Args:
        visitor_stats_service: The visitor stats service instance
        admin_required: Decorator restricting routes to admins
        admin_path: Hidden admin prefix

    Returns:
        Flask blueprint with visitor stats routes
    """
    blueprint = Blueprint('visitor_stats', __name__, url_prefix=admin_path)

    @blueprint.errorhandler(BackendError)
    def backend_error(error: BackendError):
        logger.error(f"Analytics query failed on {request.path}: {error}")
        return jsonify({"error": error.message}), 502

    @blueprint.route('/', methods=['GET'])
    @admin_required
    def dashboard():
        """Admin panel landing: headline numbers and the dashboard endpoints."""
        return jsonify({
            "overview": visitor_stats_service.get_overview().to_dict(),
            "endpoints": {
                "active_visitors": f"{admin_path}/api/stats/active-visitors",
                "trends": f"{admin_path}/api/stats/trends",
                "peak_hours": f"{admin_path}/api/stats/peak-hours",
                "top_pages": f"{admin_path}/api/stats/top-pages",
                "devices": f"{admin_path}/api/stats/devices",
                "map": f"{admin_path}/api/stats/map",
                "trending": f"{admin_path}/api/trending/",
                "audit_logs": f"{admin_path}/api/audit-logs",
            }
        })

    @blueprint.route('/api/stats/overview', methods=['GET'])
    @admin_required
    def api_overview():
        return jsonify(visitor_stats_service.get_overview().to_dict())

    @blueprint.route('/api/stats/active-visitors', methods=['GET'])
    @admin_required
    def api_active_visitors():
        visitors = visitor_stats_service.get_active_visitors()
        return jsonify({"count": len(visitors), "visitors": visitors})

    @blueprint.route('/api/stats/trends', methods=['GET'])
    @admin_required
    def api_trends():
        return jsonify(chart(visitor_stats_service.get_visitor_trends()))

    @blueprint.route('/api/stats/peak-hours', methods=['GET'])
    @admin_required
    def api_peak_hours():
        return jsonify(chart(visitor_stats_service.get_peak_hours()))

    @blueprint.route('/api/stats/top-pages', methods=['GET'])
    @admin_required
    def api_top_pages():
        limit = max(1, min(request.args.get('limit', 10, type=int), 50))
        return jsonify(visitor_stats_service.get_top_pages(limit))

    @blueprint.route('/api/stats/devices', methods=['GET'])
    @admin_required
    def api_device_stats():
        return jsonify(visitor_stats_service.get_device_stats().to_dict())

    @blueprint.route('/api/stats/map', methods=['GET'])
    @admin_required
    def api_map_points():
        return jsonify([point.to_dict() for point in visitor_stats_service.get_map_points()])

    return blueprint
