"""
Tests for admin login, logout and the admin guard.
"""
from app.user_management.services import ACCESS_TOKEN_COOKIE
from portal_service.backend.memory import RATE_LIMIT_ATTEMPTS
from portal_service.email_verification.validation import INVALID_FORMAT

ADMIN_PATH = "/cms-0x9f3b"


def _login(client, email="admin@ndrysho.al", password="secret123", **extra):
    return client.post("/auth/login", json={"email": email, "password": password, **extra})


class TestLogin:
    """Admin login flow."""

    def test_successful_login_sets_cookie(self, client, portal_backend):
        portal_backend.add_user("admin@ndrysho.al", "secret123", role="admin")

        response = _login(client, email="  Admin@Ndrysho.al ")

        assert response.status_code == 200
        data = response.get_json()
        assert data["ok"] is True
        assert data["redirect"] == ADMIN_PATH
        assert "access_token" not in data
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is not None

        attempts = portal_backend.rows("login_attempts")
        assert attempts[0]["email"] == "admin@ndrysho.al"
        assert attempts[0]["success"] is True

    def test_login_with_form_body(self, client, portal_backend):
        portal_backend.add_user("admin@ndrysho.al", "secret123", role="admin")
        response = client.post("/auth/login", data={"email": "admin@ndrysho.al", "password": "secret123"})
        assert response.status_code == 200

    def test_invalid_email_format(self, client, portal_backend):
        response = _login(client, email="not-an-email")

        assert response.status_code == 400
        assert response.get_json()["message"] == INVALID_FORMAT
        assert portal_backend.rows("login_attempts") == []

    def test_short_password(self, client):
        response = _login(client, password="12345", lang="en")
        assert response.status_code == 400
        assert response.get_json()["message"] == "Password must be at least 6 characters"

    def test_wrong_password(self, client, portal_backend):
        portal_backend.add_user("admin@ndrysho.al", "secret123", role="admin")

        response = _login(client, password="wrong-password")

        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid login credentials"
        assert client.get_cookie(ACCESS_TOKEN_COOKIE) is None
        assert portal_backend.rows("login_attempts")[0]["success"] is False

    def test_rate_limited_after_failures(self, client, portal_backend):
        portal_backend.add_user("admin@ndrysho.al", "secret123", role="admin")
        for _ in range(RATE_LIMIT_ATTEMPTS):
            assert _login(client, password="wrong-password").status_code == 401

        response = _login(client, lang="en")

        assert response.status_code == 429
        assert "15 minutes" in response.get_json()["message"]

    def test_verifier_rejection_with_suggestion(self, portal_config, portal_backend, tmp_path):
        from app.main import create_app
        from portal_service.email_verification import EmailVerificationClient

        verifier = EmailVerificationClient(
            lambda email: {"valid": False, "error": "This email address does not exist",
                           "suggestion": "admin@gmail.com"},
            sleep=lambda s: None,
        )
        app = create_app(portal_config, backend=portal_backend, email_verifier=verifier,
                         visitor_data_dir=tmp_path)

        response = _login(app.test_client(), email="admin@gmail.co")

        assert response.status_code == 400
        assert response.get_json()["suggestion"] == "admin@gmail.com"
        assert portal_backend.rows("login_attempts") == []
        app.extensions["portal"]["visitor_stats"]["service"].close()

    def test_valid_email_keeps_suggestion(self, portal_config, portal_backend, tmp_path):
        from app.main import create_app
        from portal_service.email_verification import EmailVerificationClient

        portal_backend.add_user("admin@ndrysho.al", "secret123", role="admin")
        verifier = EmailVerificationClient(
            lambda email: {"valid": True, "suggestion": "admin@ndrysho.com",
                           "message": "Did you mean admin@ndrysho.com?"},
            sleep=lambda s: None,
        )
        app = create_app(portal_config, backend=portal_backend, email_verifier=verifier,
                         visitor_data_dir=tmp_path)

        response = _login(app.test_client())

        assert response.status_code == 200
        data = response.get_json()
        assert data["ok"] is True
        assert data["suggestion"] == "admin@ndrysho.com"
        assert data["suggestion_message"] == "Did you mean admin@ndrysho.com?"
        app.extensions["portal"]["visitor_stats"]["service"].close()


class TestAdminGuard:
    """Only signed-in admins reach the hidden admin prefix."""

    def test_anonymous_redirected_home(self, client):
        response = client.get(f"{ADMIN_PATH}/")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/")

    def test_non_admin_redirected(self, client, portal_backend):
        portal_backend.add_user("editor@ndrysho.al", "secret123")
        assert _login(client, email="editor@ndrysho.al").status_code == 200

        assert client.get(f"{ADMIN_PATH}/api/stats/overview").status_code == 302

    def test_admin_reaches_dashboard(self, admin_client):
        response = admin_client.get(f"{ADMIN_PATH}/")
        assert response.status_code == 200
        assert "overview" in response.get_json()

    def test_session_status(self, admin_client, client):
        assert admin_client.get("/auth/session").get_json() == {
            "authenticated": True, "email": "admin@ndrysho.al", "is_admin": True,
        }
        assert client.get("/auth/session").get_json()["authenticated"] is False

    def test_logout_revokes_session(self, admin_client):
        response = admin_client.post("/auth/logout")

        assert response.status_code == 200
        assert admin_client.get_cookie(ACCESS_TOKEN_COOKIE) is None
        assert admin_client.get(f"{ADMIN_PATH}/").status_code == 302
