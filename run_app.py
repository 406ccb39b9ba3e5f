#!/usr/bin/env python3
"""
Simple runner script for the Flask application.
"""

from config_manager import get_app_config
from portal_service.logging_config import setup_logging

from app.main import app

if __name__ == "__main__":
    app_config = get_app_config()
    setup_logging(app_config.debug)

    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug
    )
