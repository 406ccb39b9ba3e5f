import argparse
import logging
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from portal_service.backend import BackendClient, MemoryBackend, build_backend
from portal_service.email_verification import (
    AbstractApiVerifier,
    EmailVerificationClient,
    backend_verifier,
    validate_email,
)

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


# -----------------------------------------------------------------------------
# Backend and email verification
# -----------------------------------------------------------------------------

def register_local_functions(backend: MemoryBackend, email_config) -> None:
    """Stand-ins for the hosted functions when running on the in-memory backend."""
    if email_config.abstractapi_key:
        backend.register_function("verify-email", lambda body: AbstractApiVerifier(
            email_config.abstractapi_key)(body.get("email", "")))
    else:
        def verify_locally(body):
            email = body.get("email", "")
            valid, error = validate_email(email)
            return {"valid": valid, "email": email, "error": error}
        backend.register_function("verify-email", verify_locally)

    backend.register_function("get-client-ip", lambda body: {"ip": None})


def create_email_verifier(backend: BackendClient, email_config) -> Optional[EmailVerificationClient]:
    provider = (email_config.provider or "").lower()
    if provider in ("", "none"):
        return None
    if provider == "abstractapi":
        verifier = AbstractApiVerifier(email_config.abstractapi_key)
    else:
        verifier = backend_verifier(backend)
    return EmailVerificationClient(
        verifier,
        max_retries=email_config.max_retries,
        base_delay=email_config.base_delay_seconds,
    )


# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------

def create_app(config_manager: Optional[ConfigManager] = None,
               backend: Optional[BackendClient] = None,
               email_verifier: Optional[EmailVerificationClient] = None,
               visitor_data_dir: Optional[Path] = None) -> Flask:
    """Build the portal application.

    Args:
        config_manager: Configuration source (defaults to web_app_config.json + env)
        backend: Backend client; built from configuration when omitted
        email_verifier: Email verification client; built from configuration when omitted
        visitor_data_dir: Directory for per-visitor state files

    Returns:
        Configured Flask application
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    tracking_config = config_manager.get_tracking_config()
    trending_config = config_manager.get_trending_config()
    email_config = config_manager.get_email_verification_config()
    geolocation_config = config_manager.get_geolocation_config()
    paths_config = config_manager.get_paths_config()

    if backend is None:
        backend_config = config_manager.get_backend_config()
        backend = build_backend(
            backend_config.provider,
            url=backend_config.url,
            api_key=backend_config.service_role_key or backend_config.anon_key,
            timeout=backend_config.timeout,
        )
        if isinstance(backend, MemoryBackend):
            register_local_functions(backend, email_config)

    if email_verifier is None:
        email_verifier = create_email_verifier(backend, email_config)

    visitor_data_dir = Path(visitor_data_dir or PROJECT_ROOT / paths_config.visitor_data_dir)
    admin_path = app_config.admin_path

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_for=1,     # trust 1 hop for X-Forwarded-For
        x_proto=1,   # trust 1 hop for X-Forwarded-Proto
        x_host=1,    # trust 1 hop for X-Forwarded-Host
        x_prefix=1)  # trust 1 hop for X-Forwarded-Prefix
    app.json.ensure_ascii = False

    # Initialize modules
    from app.user_management.factory import create_user_management_module
    from app.visitor_tracking.factory import create_visitor_tracking_module
    from app.content_pages.factory import create_content_pages_module
    from app.trending.factory import create_trending_module
    from app.visitor_stats.factory import create_visitor_stats_module
    from app.audit_log.factory import create_audit_log_module
    from app.content_admin.factory import create_content_admin_module

    user_management_module = create_user_management_module(
        backend=backend,
        admin_path=admin_path,
        email_verifier=email_verifier,
        default_language=app_config.default_language
    )
    admin_required = user_management_module["service"].admin_required

    visitor_tracking_module = create_visitor_tracking_module(
        backend=backend,
        visitor_data_dir=visitor_data_dir,
        tracking_config=tracking_config,
        geolocation_config=geolocation_config
    )

    content_pages_module = create_content_pages_module(
        backend=backend,
        tracking_service=visitor_tracking_module["service"],
        default_language=app_config.default_language
    )

    trending_module = create_trending_module(
        backend=backend,
        trending_config=trending_config,
        admin_required=admin_required,
        admin_path=admin_path
    )

    visitor_stats_module = create_visitor_stats_module(
        backend=backend,
        tracking_config=tracking_config,
        trending_config=trending_config,
        admin_required=admin_required,
        admin_path=admin_path
    )

    audit_log_module = create_audit_log_module(
        backend=backend,
        admin_required=admin_required,
        admin_path=admin_path
    )

    content_admin_module = create_content_admin_module(
        backend=backend,
        audit_recorder=audit_log_module["service"],
        admin_required=admin_required,
        admin_path=admin_path
    )

    # Register blueprints
    app.register_blueprint(visitor_tracking_module["blueprint"])
    app.register_blueprint(user_management_module["blueprint"])
    app.register_blueprint(content_pages_module["blueprint"])
    app.register_blueprint(trending_module["blueprint"])
    app.register_blueprint(visitor_stats_module["blueprint"])
    app.register_blueprint(audit_log_module["blueprint"])
    app.register_blueprint(content_admin_module["blueprint"])

    app.extensions["portal"] = {
        "backend": backend,
        "config": config_manager,
        "user_management": user_management_module,
        "visitor_tracking": visitor_tracking_module,
        "content_pages": content_pages_module,
        "trending": trending_module,
        "visitor_stats": visitor_stats_module,
        "audit_log": audit_log_module,
        "content_admin": content_admin_module,
    }

    @app.get("/actuator/health")
    def actuator_health():
        """Health check endpoint for monitoring tools and cloud platforms."""
        return jsonify({
            "status": "UP",
            "service": "ndrysho-portal"
        }), 200

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found", "path": request.path}), 404

    return app


app = create_app()


if __name__ == "__main__":
    from portal_service.logging_config import setup_logging

    parser = argparse.ArgumentParser(description="Bilingual portal web application")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    app_config = ConfigManager().get_app_config()

    # Override configuration with command line arguments
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = args.debug

    setup_logging(app_config.debug)
    logger.info(f"Serving on {app_config.host}:{app_config.port}, admin panel at {app_config.admin_path}")
    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug
    )
