"""
Public page routes. Each GET here is a tracked navigation.
"""
import logging

from flask import Blueprint, abort, g, jsonify, request

from portal_service.backend import BackendError
from portal_service.i18n import resolve_language
from .services import SECTION_CONTENT, ContentService

logger = logging.getLogger(__name__)


def create_content_pages_blueprint(content_service: ContentService, tracking_service,
                                   default_language: str = "sq") -> Blueprint:
    """Create the public pages blueprint."""
    bp = Blueprint('content_pages', __name__)

    def current_language() -> str:
        return resolve_language(request.args.get('lang'), default_language)

    @bp.errorhandler(BackendError)
    def backend_unavailable(error: BackendError):
        logger.error(f"Content backend error on {request.path}: {error}")
        return jsonify({"error": "Content is temporarily unavailable"}), 502

    @bp.route('/', methods=['GET'])
    def home():
        return jsonify(content_service.home(current_language()))

    @bp.route('/about', methods=['GET'])
    def about():
        return jsonify(content_service.about(current_language()))

    @bp.route('/contact', methods=['GET'])
    def contact():
        return jsonify(content_service.contact(current_language()))

    @bp.route('/auth', methods=['GET'])
    def login_page():
        return jsonify(content_service.login_page(current_language()))

    @bp.route('/<any(health, jobs, myths):section>', methods=['GET'])
    def section_list(section):
        content_type = SECTION_CONTENT[section]
        items = content_service.list_items(content_type, current_language())
        return jsonify({"type": content_type.value, "items": items, "count": len(items)})

    @bp.route('/<any(health, jobs, myths):section>/<item_id>', methods=['GET'])
    def section_detail(section, item_id):
        content_type = SECTION_CONTENT[section]
        item = content_service.get_item(content_type, item_id, current_language())
        if item is None:
            abort(404)

        tracking_service.track_content_view(g.visitor_session_id, content_type.value, item_id)
        return jsonify({"type": content_type.value, "item": item})

    return bp
