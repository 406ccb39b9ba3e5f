"""
Admin login models.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LoginOutcome:
    """Result of an admin login attempt."""
    ok: bool
    status: int
    message: str
    access_token: Optional[str] = None
    redirect: Optional[str] = None
    suggestion: Optional[str] = None
    suggestion_message: Optional[str] = None
    warning: Optional[str] = None

    @classmethod
    def rejected(cls, status: int, message: str, suggestion: Optional[str] = None,
                 warning: Optional[str] = None) -> "LoginOutcome":
        return cls(ok=False, status=status, message=message, suggestion=suggestion, warning=warning)

    def to_dict(self) -> Dict[str, Any]:
        """Public response body; the access token travels only as a cookie."""
        data = {"ok": self.ok, "message": self.message}
        for key in ("redirect", "suggestion", "suggestion_message", "warning"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data
