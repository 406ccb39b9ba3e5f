"""
Admin content routes.
"""
import logging

from flask import Blueprint, g, jsonify, request
from pydantic import ValidationError

from portal_service.backend import BackendError
from portal_service.models.records import ContentType
from .services import ContentAdminService, ContentNotFound

logger = logging.getLogger(__name__)


def _validation_messages(error: ValidationError):
    return [
        {"field": ".".join(str(part) for part in item["loc"]), "message": item["msg"]}
        for item in error.errors()
    ]


def create_content_admin_blueprint(service: ContentAdminService, admin_required, admin_path: str) -> Blueprint:
    """Create the admin content management blueprint."""
    bp = Blueprint('content_admin', __name__, url_prefix=f"{admin_path}/api/content")

    @bp.errorhandler(ValidationError)
    def invalid_form(error: ValidationError):
        return jsonify({"error": "Invalid form data", "details": _validation_messages(error)}), 400

    @bp.errorhandler(ContentNotFound)
    def not_found(error: ContentNotFound):
        return jsonify({"error": str(error)}), 404

    @bp.errorhandler(BackendError)
    def backend_failed(error: BackendError):
        logger.error(f"Content mutation failed on {request.path}: {error}")
        return jsonify({"error": error.message}), 502

    def body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    @bp.route('/<any(articles, jobs, myths):table>', methods=['GET'])
    @admin_required
    def list_items(table):
        items = service.list_items(ContentType(table))
        return jsonify({"items": items, "count": len(items)})

    @bp.route('/<any(articles, jobs, myths):table>', methods=['POST'])
    @admin_required
    def create_item(table):
        result = service.create(ContentType(table), body(), g.access_token)
        return jsonify(result.to_dict()), 201

    @bp.route('/<any(articles, jobs, myths):table>/<item_id>', methods=['PUT'])
    @admin_required
    def update_item(table, item_id):
        result = service.update(ContentType(table), item_id, body(), g.access_token)
        return jsonify(result.to_dict())

    @bp.route('/<any(articles, jobs, myths):table>/<item_id>', methods=['DELETE'])
    @admin_required
    def delete_item(table, item_id):
        result = service.delete(ContentType(table), item_id, g.access_token)
        return jsonify(result.to_dict())

    return bp
