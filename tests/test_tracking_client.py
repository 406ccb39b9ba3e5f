"""
Tests for the per-browser tracking client.
"""
from unittest.mock import MagicMock

from portal_service.kv_store import MemoryStore
from portal_service.models.results import GeoLocation
from portal_service.tracking import SESSION_ID_KEY, TrackingClient


class TestTrackingClient:
    """End-to-end tracking flow against the memory backend."""

    def test_navigate_writes_heartbeat_and_page_view(self, backend, clock, manual_timer):
        store = MemoryStore()
        client = TrackingClient(backend, store, user_agent="UA", clock=clock, timer_factory=manual_timer)

        results = client.navigate("/jobs", referrer="https://example.org")

        assert results["heartbeat"].ok
        assert results["page_view"].ok
        assert store.get(SESSION_ID_KEY) == client.session_id
        assert backend.rows("active_visitors")[0]["session_id"] == client.session_id
        assert backend.rows("page_views")[0]["referrer"] == "https://example.org"

    def test_navigation_moves_single_active_row(self, backend, clock, manual_timer):
        client = TrackingClient(backend, clock=clock, timer_factory=manual_timer)
        client.navigate("/")
        client.navigate("/health")

        rows = backend.rows("active_visitors")
        assert len(rows) == 1
        assert rows[0]["page_path"] == "/health"
        assert len(backend.rows("page_views")) == 2

    def test_geolocation_resolved_once(self, backend, clock, manual_timer):
        resolver = MagicMock()
        resolver.resolve.return_value = GeoLocation(country="Albania")
        client = TrackingClient(backend, geolocation_resolver=resolver, clock=clock,
                                timer_factory=manual_timer)

        client.navigate("/")
        client.navigate("/jobs")

        resolver.resolve.assert_called_once()
        assert backend.rows("active_visitors")[0]["country"] == "Albania"

    def test_without_resolver_location_is_null(self, backend, clock, manual_timer):
        client = TrackingClient(backend, clock=clock, timer_factory=manual_timer)
        client.navigate("/")
        assert backend.rows("active_visitors")[0]["latitude"] is None

    def test_shared_store_shares_session(self, backend, clock, manual_timer):
        store = MemoryStore()
        first = TrackingClient(backend, store, clock=clock, timer_factory=manual_timer)
        second = TrackingClient(backend, store, clock=clock, timer_factory=manual_timer)
        assert first.session_id == second.session_id

    def test_view_content(self, backend, clock, manual_timer):
        backend.seed("myths", [{"id": "m1", "views": 0}])
        client = TrackingClient(backend, clock=clock, timer_factory=manual_timer)

        assert client.view_content("myths", "m1").ok
        assert client.view_content("myths", "m1").skipped
        assert backend.rows("myths")[0]["views"] == 1

    def test_context_manager_stops_heartbeat(self, backend, clock, manual_timer):
        with TrackingClient(backend, clock=clock, timer_factory=manual_timer) as client:
            client.navigate("/")
            assert client.heartbeat.running
        assert not client.heartbeat.running
        assert manual_timer.instances[-1].cancelled
