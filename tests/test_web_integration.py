"""
Integration tests for the public pages and server-side visitor tracking.
"""

from unittest.mock import patch

from portal_service.backend import BackendError, MemoryBackend
from portal_service.models.results import GeoLocation

JOB = {
    "id": "0a1b", "business_name": "Spitali Amerikan",
    "position_sq": "Infermiere", "position_en": "Nurse",
    "location_sq": "Tiranë", "location_en": "Tirana",
    "description_sq": "Përshkrim", "description_en": "Description",
    "posted_at": "2025-03-01T09:00:00+00:00",
}


class TestPublicPages:
    """Bilingual public pages."""

    def test_health_endpoint(self, client):
        response = client.get("/actuator/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "UP", "service": "ndrysho-portal"}

    def test_home_lists_latest_per_section(self, client, portal_backend):
        portal_backend.seed("jobs", [JOB])
        data = client.get("/").get_json()

        assert data["title"] == "Ndrysho"
        assert set(data["sections"]) == {"health", "jobs", "myths"}
        assert data["sections"]["jobs"]["latest"][0]["position"] == "Infermiere"

    def test_section_in_english(self, client, portal_backend):
        portal_backend.seed("jobs", [JOB])
        data = client.get("/jobs?lang=en").get_json()

        assert data["type"] == "jobs"
        item = data["items"][0]
        assert item["position"] == "Nurse"
        assert item["location"] == "Tirana"
        assert "position_sq" not in item

    def test_unknown_language_uses_default(self, client):
        assert client.get("/about?lang=de").get_json()["title"] == "Rreth Ndrysho"
        assert client.get("/about?lang=en").get_json()["title"] == "About Ndrysho"

    def test_contact(self, client):
        data = client.get("/contact").get_json()
        assert data["email"] == "ndysho6@gmail.com"
        assert data["instagram"] == "@ndrysho_portal"

    def test_login_page(self, client):
        assert client.get("/auth?lang=en").get_json()["title"] == "Admin Panel"

    def test_missing_item_is_404(self, client):
        response = client.get("/jobs/ffff")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Not found"

    def test_unknown_path_is_json_404(self, client):
        response = client.get("/nowhere/at/all")
        assert response.status_code == 404
        assert response.get_json()["path"] == "/nowhere/at/all"

    def test_backend_failure_is_502(self, portal_config, tmp_path):
        from app.main import create_app

        class FailingBackend(MemoryBackend):
            def select(self, table, *args, **kwargs):
                if table == "jobs":
                    raise BackendError("connection reset")
                return super().select(table, *args, **kwargs)

        app = create_app(portal_config, backend=FailingBackend(), visitor_data_dir=tmp_path)
        response = app.test_client().get("/jobs")

        assert response.status_code == 502
        app.extensions["portal"]["visitor_stats"]["service"].close()


class TestVisitorTracking:
    """Page requests drive heartbeats, page views and content views."""

    def test_first_visit_sets_session_cookie(self, client, portal_backend):
        response = client.get("/health", headers={"User-Agent": "Mozilla/5.0 Firefox/121.0"})
        assert response.status_code == 200

        cookie = client.get_cookie("visitor_session_id")
        assert cookie is not None

        visitors = portal_backend.rows("active_visitors")
        assert len(visitors) == 1
        assert visitors[0]["session_id"] == cookie.value
        assert visitors[0]["page_path"] == "/health"
        assert visitors[0]["user_agent"] == "Mozilla/5.0 Firefox/121.0"

    def test_navigation_keeps_one_active_row(self, client, portal_backend):
        client.get("/")
        client.get("/jobs")
        client.get("/myths")

        visitors = portal_backend.rows("active_visitors")
        assert len(visitors) == 1
        assert visitors[0]["page_path"] == "/myths"
        assert [row["page_path"] for row in portal_backend.rows("page_views")] == ["/", "/jobs", "/myths"]

    def test_page_views_deduplicated_per_visitor(self, client, portal_backend, portal_app):
        client.get("/jobs")
        client.get("/jobs")
        assert len(portal_backend.rows("page_views")) == 1

        other = portal_app.test_client()
        other.get("/jobs")
        assert len(portal_backend.rows("page_views")) == 2
        assert len(portal_backend.rows("active_visitors")) == 2

    def test_detail_view_counted_once(self, client, portal_backend):
        portal_backend.seed("jobs", [dict(JOB, views=0)])

        assert client.get("/jobs/0a1b").status_code == 200
        client.get("/jobs/0a1b")

        assert portal_backend.rows("jobs")[0]["views"] == 1

    def test_referrer_recorded(self, client, portal_backend):
        client.get("/", headers={"Referer": "https://www.google.com/"})
        assert portal_backend.rows("page_views")[0]["referrer"] == "https://www.google.com/"

    def test_api_and_auth_routes_not_tracked(self, client, portal_backend):
        client.get("/actuator/health")
        client.get("/auth/session")
        assert portal_backend.rows("page_views") == []

    def test_private_ip_has_no_location(self, client, portal_backend):
        client.get("/", headers={"X-Forwarded-For": "192.168.0.7"})
        assert portal_backend.rows("active_visitors")[0]["country"] is None

    def test_forwarded_ip_taken_from_trusted_hop(self, client, portal_app):
        tracking_service = portal_app.extensions["portal"]["visitor_tracking"]["service"]
        with patch.object(tracking_service, "resolve_geolocation", return_value=GeoLocation()) as resolve:
            client.get("/", headers={"X-Forwarded-For": "1.2.3.4, 203.0.113.9"})

        assert resolve.call_args[0][1] == "203.0.113.9"

    def test_heartbeat_beacon(self, client, portal_backend):
        client.get("/")
        response = client.post("/api/track/heartbeat", json={"page_path": "/jobs"})

        assert response.status_code == 200
        assert response.get_json()["ok"] is True
        assert portal_backend.rows("active_visitors")[0]["page_path"] == "/jobs"

    def test_heartbeat_rejects_relative_path(self, client):
        response = client.post("/api/track/heartbeat", json={"page_path": "jobs"})
        assert response.status_code == 400
