"""
Shared fixtures for the portal tests.
"""
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.user_management.services import ACCESS_TOKEN_COOKIE
from config_manager import ConfigManager
from portal_service.backend import MemoryBackend
from portal_service.email_verification import EmailVerificationClient
from portal_service.kv_store import MemoryStore


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class ManualTimer:
    """Heartbeat timer double; ``fire()`` runs one tick."""

    instances = []

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False
        ManualTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def backend(clock):
    return MemoryBackend(clock=clock)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def manual_timer():
    ManualTimer.instances = []
    return ManualTimer


@pytest.fixture
def portal_config(tmp_path):
    with patch.dict(os.environ, {}, clear=True):
        return ConfigManager(str(tmp_path / "web_app_config.json"))


@pytest.fixture
def portal_backend():
    return MemoryBackend()


@pytest.fixture
def portal_app(portal_config, portal_backend, tmp_path):
    from app.main import create_app

    verifier = EmailVerificationClient(lambda email: {"valid": True, "email": email}, sleep=lambda s: None)
    app = create_app(portal_config, backend=portal_backend, email_verifier=verifier,
                     visitor_data_dir=tmp_path / "visitor_data")
    app.config["TESTING"] = True
    yield app
    app.extensions["portal"]["visitor_stats"]["service"].close()


@pytest.fixture
def client(portal_app):
    return portal_app.test_client()


@pytest.fixture
def admin_client(portal_app, portal_backend):
    portal_backend.add_user("admin@ndrysho.al", "secret123", role="admin", user_id="admin-1")
    client = portal_app.test_client()
    client.set_cookie(ACCESS_TOKEN_COOKIE, portal_backend.issue_token("admin@ndrysho.al"))
    return client
