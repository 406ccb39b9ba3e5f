"""
Admin authentication and authorization services.

Passwords and sessions are handled by the backend's auth; this service only
guards the login form and checks the ``admin`` role.
"""
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import g, redirect, request

from portal_service.backend import BackendClient, BackendError, eq
from portal_service.email_verification import EmailVerificationClient, normalize_email, validate_email
from portal_service.i18n import pick
from portal_service.models.records import LoginAttempt
from .models import LoginOutcome

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb_access_token"
ADMIN_ROLE = "admin"
MIN_PASSWORD_LENGTH = 6


class AdminAuthService:
    """Service for admin login, logout and role checks."""

    def __init__(self, backend: BackendClient, admin_path: str,
                 email_verifier: Optional[EmailVerificationClient] = None):
        self.backend = backend
        self.admin_path = admin_path
        self.email_verifier = email_verifier

    def get_access_token(self) -> Optional[str]:
        """Get the backend access token from cookies."""
        return request.cookies.get(ACCESS_TOKEN_COOKIE)

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        token = self.get_access_token()
        if not token:
            return None
        try:
            return self.backend.get_user(token)
        except BackendError as e:
            logger.error(f"Could not resolve current user: {e}")
            return None

    def is_admin_user(self, user_id: str) -> bool:
        """Check the user_roles table for an admin row."""
        try:
            row = self.backend.select_one("user_roles", [eq("user_id", user_id), eq("role", ADMIN_ROLE)])
        except BackendError as e:
            logger.error(f"Role check failed for {user_id}: {e}")
            return False
        return row is not None

    def admin_required(self, f: Callable) -> Callable:
        """Decorator: anyone but a signed-in admin is sent to the home page."""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = self.get_current_user()
            if not user or not self.is_admin_user(user.get("id", "")):
                return redirect("/")
            g.admin_user = user
            g.access_token = self.get_access_token()
            return f(*args, **kwargs)
        return decorated_function

    def login(self, email: str, password: str, lang: str = "sq") -> LoginOutcome:
        """
        Run the admin login flow.

        Order: local email rules, password length, remote email verification,
        rate limit, password sign-in, login attempt log.
        """
        normalized = normalize_email(email)

        valid, error = validate_email(normalized)
        if not valid:
            return LoginOutcome.rejected(400, error)

        if len(password or "") < MIN_PASSWORD_LENGTH:
            return LoginOutcome.rejected(400, pick(
                f"Fjalëkalimi duhet të ketë të paktën {MIN_PASSWORD_LENGTH} karaktere",
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                lang,
            ))

        warning = suggestion = suggestion_message = None
        if self.email_verifier is not None:
            verification = self.email_verifier.verify_email(normalized)
            if not verification.valid:
                return LoginOutcome.rejected(
                    400,
                    verification.error or pick("Email i pavlefshëm", "Invalid email", lang),
                    suggestion=verification.suggestion,
                )
            warning = verification.warning
            # A valid address may still carry a correction to offer alongside the result.
            suggestion = verification.suggestion
            suggestion_message = verification.message

        try:
            rate_limited = bool(self.backend.rpc("is_rate_limited", {"user_email": normalized}))
        except BackendError as e:
            logger.error(f"Rate limit check error: {e}")
            rate_limited = False

        if rate_limited:
            return LoginOutcome.rejected(429, pick(
                "Ju keni bërë shumë përpjekje të dështuara. Ju lutemi provoni përsëri pas 15 minutash.",
                "Too many failed attempts. Please try again after 15 minutes.",
                lang,
            ))

        sign_in_error = None
        session = None
        try:
            session = self.backend.sign_in_with_password(normalized, password)
        except BackendError as e:
            sign_in_error = e

        self._record_attempt(normalized, success=sign_in_error is None)

        if sign_in_error is not None:
            logger.info(f"Failed admin login for {normalized}: {sign_in_error}")
            return LoginOutcome.rejected(
                401,
                sign_in_error.message or pick("Kredencialet janë të gabuara", "Invalid credentials", lang),
                warning=warning,
                suggestion=suggestion,
            )

        logger.info(f"Admin login for {normalized}")
        return LoginOutcome(
            ok=True,
            status=200,
            message=pick("Jeni identifikuar me sukses", "Successfully logged in", lang),
            access_token=session["access_token"],
            redirect=self.admin_path,
            suggestion=suggestion,
            suggestion_message=suggestion_message,
            warning=warning,
        )

    def _record_attempt(self, email: str, success: bool) -> None:
        attempt = LoginAttempt(email=email, success=success)
        try:
            self.backend.insert("login_attempts", attempt.model_dump())
        except BackendError as e:
            logger.warning(f"Could not record login attempt for {email}: {e}")

    def logout(self, access_token: str) -> None:
        try:
            self.backend.sign_out(access_token)
        except BackendError as e:
            logger.warning(f"Sign-out failed: {e}")
