"""
Trending routes for API endpoints.
"""
import logging

from flask import Blueprint, jsonify, request

from portal_service.backend import BackendError
from portal_service.i18n import resolve_language
from .services import TrendingService

logger = logging.getLogger(__name__)


def create_trending_routes(trending_service: TrendingService, admin_required, url_prefix: str,
                           default_limit: int = 10, refresh_seconds: int = 30) -> Blueprint:
    """Create trending routes blueprint."""
    bp = Blueprint('trending', __name__, url_prefix=url_prefix)

    @bp.errorhandler(BackendError)
    def backend_error(error: BackendError):
        logger.error(f"Trending query failed: {error}")
        return jsonify({"error": error.message}), 502

    @bp.route('/', methods=['GET'])
    @admin_required
    def get_trending():
        """
        Get trending content of the trailing window.

        Query parameters:
            - lang: Title language (sq or en, default sq)
            - limit: Maximum items to return (default 10, max 50)
        """
        lang = resolve_language(request.args.get('lang'))
        try:
            limit = int(request.args.get('limit', default_limit))
        except ValueError:
            limit = default_limit

        limit = max(1, min(limit, 50))

        items = trending_service.get_trending(lang=lang, limit=limit)

        return jsonify({
            "period_days": trending_service.window_days,
            "items": [item.to_dict() for item in items],
            "count": len(items),
            "refresh_seconds": refresh_seconds
        })

    return bp
