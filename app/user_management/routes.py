"""
Admin authentication routes.
"""
from flask import Blueprint, jsonify, make_response, request

from portal_service.i18n import resolve_language
from .services import ACCESS_TOKEN_COOKIE, AdminAuthService


def create_user_routes(auth_service: AdminAuthService, default_language: str = "sq") -> Blueprint:
    """Create admin authentication routes."""
    bp = Blueprint('user_management', __name__, url_prefix='/auth')

    @bp.route("/login", methods=["POST"])
    def login():
        """Sign in with email and password (form or JSON body)."""
        data = request.get_json(silent=True) or request.form
        email = str(data.get("email", ""))
        password = str(data.get("password", ""))
        lang = resolve_language(data.get("lang") or request.args.get("lang"), default_language)

        outcome = auth_service.login(email, password, lang)
        resp = make_response(jsonify(outcome.to_dict()), outcome.status)
        if outcome.ok:
            resp.set_cookie(
                ACCESS_TOKEN_COOKIE, outcome.access_token,
                httponly=True, samesite="Lax", secure=request.is_secure,
            )
        return resp

    @bp.route("/logout", methods=["POST"])
    def logout():
        token = auth_service.get_access_token()
        if token:
            auth_service.logout(token)
        resp = make_response(jsonify({"ok": True}))
        resp.delete_cookie(ACCESS_TOKEN_COOKIE)
        return resp

    @bp.route("/session", methods=["GET"])
    def session_status():
        """Who is signed in and whether they may open the admin panel."""
        user = auth_service.get_current_user()
        if not user:
            return jsonify({"authenticated": False, "is_admin": False})
        return jsonify({
            "authenticated": True,
            "email": user.get("email"),
            "is_admin": auth_service.is_admin_user(user.get("id", "")),
        })

    return bp
