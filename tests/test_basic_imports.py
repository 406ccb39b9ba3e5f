"""
Basic import tests to verify the core functionality.
"""


def test_portal_service_imports():
    """Test that the portal_service package exposes its public API."""
    from portal_service import (
        AuditLogRecorder,
        ChangeFeed,
        EmailVerificationClient,
        MemoryBackend,
        TrackingClient,
        build_backend,
        parse_user_agent,
        validate_email,
    )

    assert callable(build_backend)
    assert callable(parse_user_agent)
    assert callable(validate_email)

    backend = MemoryBackend(change_feed=ChangeFeed())
    assert isinstance(AuditLogRecorder(backend), AuditLogRecorder)
    assert EmailVerificationClient.from_backend(backend).max_retries == 3
    assert TrackingClient(backend).session_id


def test_subsystem_factories_import():
    """Test that every app subsystem factory can be imported."""
    from app.audit_log.factory import create_audit_log_module
    from app.content_admin.factory import create_content_admin_module
    from app.content_pages.factory import create_content_pages_module
    from app.trending.factory import create_trending_module
    from app.user_management.factory import create_user_management_module
    from app.visitor_stats.factory import create_visitor_stats_module
    from app.visitor_tracking.factory import create_visitor_tracking_module

    for factory in (
        create_audit_log_module,
        create_content_admin_module,
        create_content_pages_module,
        create_trending_module,
        create_user_management_module,
        create_visitor_stats_module,
        create_visitor_tracking_module,
    ):
        assert callable(factory)


def test_logging_setup():
    """Test that logging can be configured and stopped."""
    import logging
    import logging.handlers

    from portal_service.logging_config import setup_logging, stop_logging

    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level

    setup_logging(debug=True)
    try:
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.handlers.QueueHandler) for h in root.handlers)
    finally:
        stop_logging()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
