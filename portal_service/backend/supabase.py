"""
Supabase backend client over plain HTTP.

Tables go through PostgREST (``/rest/v1``), stored procedures through
``/rest/v1/rpc``, edge functions through ``/functions/v1`` and password auth
through GoTrue (``/auth/v1``).
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..change_feed import ChangeFeed, ChangeKind
from ..timeutils import to_iso
from .base import BackendClient, BackendError, Filter

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, datetime):
        return to_iso(value)
    return str(value)


def _filter_params(filters: Optional[Sequence[Filter]]) -> List[Tuple[str, str]]:
    params = []
    for item in filters or []:
        op = "is" if item.value is None and item.op == "eq" else item.op
        params.append((item.column, f"{op}.{_format_value(item.value)}"))
    return params


class SupabaseBackend(BackendClient):
    """BackendClient speaking the Supabase HTTP APIs with ``requests``."""

    def __init__(self, url: str, api_key: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None,
                 change_feed: Optional[ChangeFeed] = None):
        super().__init__(change_feed)
        if not url:
            raise ValueError("Supabase URL is required")
        self.base_url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def _error_from_response(self, response: requests.Response) -> BackendError:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = response.text or response.reason or f"HTTP {response.status_code}"
        code = None
        if isinstance(payload, dict):
            message = (payload.get("message") or payload.get("error_description")
                       or payload.get("msg") or payload.get("error") or message)
            code = payload.get("code")
            if code is not None:
                code = str(code)
        return BackendError(str(message), code=code, status=response.status_code, payload=payload)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackendError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            raise self._error_from_response(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def select(self, table, columns="*", filters=None, order=None, descending=False, limit=None):
        params = [("select", columns)] + _filter_params(filters)
        if order:
            params.append(("order", f"{order}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        return self._request("GET", f"/rest/v1/{table}", params=params) or []

    def insert(self, table, row):
        rows = self._request(
            "POST", f"/rest/v1/{table}", json=row,
            headers={"Prefer": "return=representation"},
        ) or [row]
        self._notify(table, ChangeKind.INSERT, rows)
        return rows[0]

    def update(self, table, values, filters):
        rows = self._request(
            "PATCH", f"/rest/v1/{table}", json=values, params=_filter_params(filters),
            headers={"Prefer": "return=representation"},
        ) or []
        self._notify(table, ChangeKind.UPDATE, rows)
        return rows

    def delete(self, table, filters):
        rows = self._request(
            "DELETE", f"/rest/v1/{table}", params=_filter_params(filters),
            headers={"Prefer": "return=representation"},
        ) or []
        self._notify(table, ChangeKind.DELETE, rows)
        return rows

    def rpc(self, name, params=None):
        return self._request("POST", f"/rest/v1/rpc/{name}", json=params or {})

    def invoke_function(self, name, body=None):
        return self._request("POST", f"/functions/v1/{name}", json=body or {})

    def get_user(self, access_token):
        if not access_token:
            return None
        try:
            return self._request(
                "GET", "/auth/v1/user",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except BackendError as e:
            if e.status in (401, 403):
                return None
            raise

    def sign_in_with_password(self, email, password):
        data = self._request(
            "POST", "/auth/v1/token", params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if not isinstance(data, dict) or not data.get("access_token"):
            raise BackendError("Invalid login credentials", status=400)
        return {"access_token": data["access_token"], "user": data.get("user") or {}}

    def sign_out(self, access_token):
        self._request(
            "POST", "/auth/v1/logout",
            headers={"Authorization": f"Bearer {access_token}"},
        )
