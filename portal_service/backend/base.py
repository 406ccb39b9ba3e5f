"""
Backend client interface.

The portal keeps all persistent state in a hosted backend exposing tables,
stored procedures (RPC), serverless functions and password auth. Clients
implement this interface; every write publishes a ChangeEvent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..change_feed import ChangeEvent, ChangeFeed, ChangeKind

UNIQUE_VIOLATION = "23505"


class BackendError(Exception):
    """Error reported by the backend or raised while reaching it."""

    def __init__(self, message: str, code: Optional[str] = None,
                 status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.payload = payload

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code {self.code})"
        return self.message


@dataclass(frozen=True)
class Filter:
    """Column filter using PostgREST operator names (eq, neq, gt, gte, lt, lte)."""
    column: str
    op: str
    value: Any


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


class BackendClient(ABC):
    """Tables, RPCs, functions and auth of the hosted backend."""

    def __init__(self, change_feed: Optional[ChangeFeed] = None):
        self.change_feed = change_feed or ChangeFeed()

    @abstractmethod
    def select(self, table: str, columns: str = "*",
               filters: Optional[Sequence[Filter]] = None,
               order: Optional[str] = None, descending: bool = False,
               limit: Optional[int] = None) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored."""

    @abstractmethod
    def update(self, table: str, values: Dict[str, Any],
               filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        """Update matching rows and return them."""

    @abstractmethod
    def delete(self, table: str, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        """Delete matching rows and return them."""

    @abstractmethod
    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        ...

    @abstractmethod
    def invoke_function(self, name: str, body: Optional[Dict[str, Any]] = None) -> Any:
        ...

    @abstractmethod
    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        """Return the user owning ``access_token`` or None when it is not valid."""

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Return ``{"access_token": ..., "user": {...}}``; raise BackendError on bad credentials."""

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        ...

    def select_one(self, table: str, filters: Sequence[Filter],
                   columns: str = "*") -> Optional[Dict[str, Any]]:
        rows = self.select(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    def _notify(self, table: str, kind: ChangeKind, records: List[Dict[str, Any]]) -> None:
        for record in records:
            self.change_feed.publish(ChangeEvent(table=table, kind=kind, record=dict(record)))
