"""
In-memory backend used for tests and local development.

Mirrors the behaviour the portal relies on from the hosted backend: unique
``session_id`` on ``active_visitors``, server-side default timestamps, atomic
view-count RPCs, the login rate-limit RPC, registered functions and password
auth with opaque access tokens.
"""

import copy
import logging
import secrets
import threading
import uuid
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..change_feed import ChangeFeed, ChangeKind
from ..timeutils import parse_iso, to_iso, utc_now
from .base import UNIQUE_VIOLATION, BackendClient, BackendError, Filter

logger = logging.getLogger(__name__)

UNIQUE_COLUMNS = {
    "active_visitors": ("session_id",),
}

# Columns the database fills with now() when omitted.
DEFAULT_TIMESTAMPS = {
    "active_visitors": "last_seen",
    "page_views": "visited_at",
    "audit_logs": "created_at",
    "login_attempts": "attempted_at",
    "articles": "published_at",
    "jobs": "posted_at",
    "myths": "created_at",
}

VIEW_COUNTER_RPCS = {
    "increment_article_views": ("articles", "article_id"),
    "increment_job_views": ("jobs", "job_id"),
    "increment_myth_views": ("myths", "myth_id"),
}

RATE_LIMIT_ATTEMPTS = 5
RATE_LIMIT_WINDOW = timedelta(minutes=15)


def _comparable(value: Any) -> Any:
    if isinstance(value, (datetime, str)):
        parsed = parse_iso(value)
        if parsed is not None:
            return parsed
    return value


def _matches(row: Dict[str, Any], item: Filter) -> bool:
    actual = row.get(item.column)
    if item.op == "eq":
        return actual == item.value
    if item.op == "neq":
        return actual != item.value
    if actual is None or item.value is None:
        return False
    left, right = _comparable(actual), _comparable(item.value)
    try:
        if item.op == "gt":
            return left > right
        if item.op == "gte":
            return left >= right
        if item.op == "lt":
            return left < right
        if item.op == "lte":
            return left <= right
    except TypeError:
        return False
    raise BackendError(f"Unsupported filter operator: {item.op}", status=400)


def _project(row: Dict[str, Any], columns: str) -> Dict[str, Any]:
    if columns.strip() == "*":
        return copy.deepcopy(row)
    wanted = [name.strip() for name in columns.split(",") if name.strip()]
    return {name: copy.deepcopy(row.get(name)) for name in wanted}


class MemoryBackend(BackendClient):
    """Thread-safe dictionary-of-lists backend."""

    def __init__(self, change_feed: Optional[ChangeFeed] = None,
                 clock: Callable[[], datetime] = utc_now):
        super().__init__(change_feed)
        self.clock = clock
        self._tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self._functions: Dict[str, Callable[[Dict[str, Any]], Any]] = {}
        self._users: Dict[str, Dict[str, Any]] = {}
        self._tokens: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    # Setup helpers

    def seed(self, table: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows without change notifications or uniqueness checks."""
        stored = []
        with self._lock:
            for row in rows:
                record = self._with_defaults(table, row)
                self._tables[table].append(record)
                stored.append(copy.deepcopy(record))
        return stored

    def rows(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._tables.get(table, []))

    def register_function(self, name: str, handler: Callable[[Dict[str, Any]], Any]) -> None:
        self._functions[name] = handler

    def add_user(self, email: str, password: str, role: Optional[str] = None,
                 user_id: Optional[str] = None) -> Dict[str, Any]:
        user = {"id": user_id or str(uuid.uuid4()), "email": email.strip().lower()}
        with self._lock:
            self._users[user["email"]] = {"user": user, "password": password}
            if role:
                self._tables["user_roles"].append({
                    "id": str(uuid.uuid4()), "user_id": user["id"], "role": role,
                })
        return dict(user)

    def issue_token(self, email: str) -> str:
        """Create a session token for an existing user without a password check."""
        with self._lock:
            account = self._users.get(email.strip().lower())
            if account is None:
                raise BackendError("User not found", status=404)
            token = secrets.token_urlsafe(24)
            self._tokens[token] = account["user"]
        return token

    def _with_defaults(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        record = copy.deepcopy(dict(row))
        record.setdefault("id", str(uuid.uuid4()))
        column = DEFAULT_TIMESTAMPS.get(table)
        if column and not record.get(column):
            record[column] = to_iso(self.clock())
        return record

    def _matching(self, table: str, filters: Optional[Sequence[Filter]]) -> List[Dict[str, Any]]:
        return [
            row for row in self._tables.get(table, [])
            if all(_matches(row, item) for item in filters or [])
        ]

    # Tables

    def select(self, table, columns="*", filters=None, order=None, descending=False, limit=None):
        with self._lock:
            rows = self._matching(table, filters)
            if order:
                present = [row for row in rows if row.get(order) is not None]
                missing = [row for row in rows if row.get(order) is None]
                present.sort(key=lambda row: _comparable(row[order]), reverse=descending)
                # Postgres puts NULLs last ascending and first descending.
                rows = missing + present if descending else present + missing
            if limit is not None:
                rows = rows[:limit]
            return [_project(row, columns) for row in rows]

    def insert(self, table, row):
        with self._lock:
            record = self._with_defaults(table, row)
            for column in UNIQUE_COLUMNS.get(table, ()):
                if any(existing.get(column) == record.get(column) for existing in self._tables[table]):
                    raise BackendError(
                        f'duplicate key value violates unique constraint "{table}_{column}_key"',
                        code=UNIQUE_VIOLATION, status=409,
                    )
            self._tables[table].append(record)
            stored = copy.deepcopy(record)
        self._notify(table, ChangeKind.INSERT, [stored])
        return stored

    def update(self, table, values, filters):
        with self._lock:
            updated = []
            for row in self._matching(table, filters):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        self._notify(table, ChangeKind.UPDATE, updated)
        return updated

    def delete(self, table, filters):
        with self._lock:
            doomed = self._matching(table, filters)
            doomed_ids = {id(row) for row in doomed}
            self._tables[table] = [row for row in self._tables.get(table, []) if id(row) not in doomed_ids]
            removed = copy.deepcopy(doomed)
        self._notify(table, ChangeKind.DELETE, removed)
        return removed

    # RPC and functions

    def rpc(self, name, params=None):
        params = params or {}
        if name in VIEW_COUNTER_RPCS:
            table, key = VIEW_COUNTER_RPCS[name]
            with self._lock:
                for row in self._tables.get(table, []):
                    if row.get("id") == params.get(key):
                        row["views"] = (row.get("views") or 0) + 1
                        return None
            return None
        if name == "is_rate_limited":
            return self._is_rate_limited(str(params.get("user_email", "")))
        raise BackendError(f"Could not find the function public.{name}", code="PGRST202", status=404)

    def _is_rate_limited(self, email: str) -> bool:
        since = self.clock() - RATE_LIMIT_WINDOW
        with self._lock:
            failures = [
                row for row in self._tables.get("login_attempts", [])
                if row.get("email") == email.strip().lower()
                and not row.get("success")
                and (parse_iso(row.get("attempted_at")) or since) > since
            ]
        return len(failures) >= RATE_LIMIT_ATTEMPTS

    def invoke_function(self, name, body=None):
        handler = self._functions.get(name)
        if handler is None:
            raise BackendError(f"Function {name} not found", status=404)
        return handler(dict(body or {}))

    # Auth

    def get_user(self, access_token):
        if not access_token:
            return None
        with self._lock:
            user = self._tokens.get(access_token)
        return dict(user) if user else None

    def sign_in_with_password(self, email, password):
        with self._lock:
            account = self._users.get(email.strip().lower())
            if account is None or not secrets.compare_digest(account["password"].encode(), password.encode()):
                raise BackendError("Invalid login credentials", code="invalid_credentials", status=400)
            token = secrets.token_urlsafe(24)
            self._tokens[token] = account["user"]
            return {"access_token": token, "user": dict(account["user"])}

    def sign_out(self, access_token):
        with self._lock:
            self._tokens.pop(access_token, None)
