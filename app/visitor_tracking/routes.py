"""
Visitor tracking routes and request hooks.
"""
from typing import Iterable

from flask import Blueprint, g, jsonify, request

from portal_service.tracking import SessionIdentity
from .services import RequestCookieStore, VisitorTrackingService, apply_pending_cookies


def create_visitor_tracking_blueprint(tracking_service: VisitorTrackingService,
                                      tracked_blueprints: Iterable[str]) -> Blueprint:
    """Create the tracking blueprint.

    Args:
        tracking_service: Service running the tracking pipeline
        tracked_blueprints: Blueprints whose GET requests count as page navigations

    Returns:
        Flask blueprint with the heartbeat endpoint and app-wide tracking hooks
    """
    bp = Blueprint('visitor_tracking', __name__)
    tracked = set(tracked_blueprints)

    @bp.before_app_request
    def track_navigation():
        g.visitor_session_id = SessionIdentity(RequestCookieStore()).get_or_create()
        if request.method == 'GET' and request.blueprint in tracked:
            g.tracking_results = tracking_service.track_page(
                session_id=g.visitor_session_id,
                page_path=request.path,
                referrer=request.referrer,
                user_agent=request.headers.get('User-Agent'),
                ip=tracking_service.get_client_ip(),
            )

    @bp.after_app_request
    def write_session_cookie(response):
        return apply_pending_cookies(response)

    @bp.route('/api/track/heartbeat', methods=['POST'])
    def heartbeat():
        """Refresh last_seen for the caller's session; sent by the page every minute."""
        data = request.get_json(silent=True) or {}
        page_path = str(data.get('page_path') or '').strip()
        if not page_path.startswith('/'):
            return jsonify({"error": "page_path must be an absolute path"}), 400

        result = tracking_service.refresh_heartbeat(g.visitor_session_id, page_path)
        return jsonify(result.to_dict())

    return bp
