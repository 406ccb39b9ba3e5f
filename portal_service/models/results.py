"""
Result and value models returned by portal operations.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


def optional_float(value: Any) -> Optional[float]:
    """Float from a numeric or numeric-string value; None for anything else."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class TrackingResult:
    """Outcome of a best-effort tracking or audit operation."""
    ok: bool
    skipped: bool = False
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "TrackingResult":
        return cls(ok=True)

    @classmethod
    def skip(cls, reason: str) -> "TrackingResult":
        return cls(ok=True, skipped=True, error=reason)

    @classmethod
    def failure(cls, error: str) -> "TrackingResult":
        return cls(ok=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GeoLocation:
    """Best-effort location of a visitor. Every field may be None."""
    ip_address: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def is_empty(self) -> bool:
        return all(value is None for value in asdict(self).values())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GeoLocation":
        if not isinstance(data, dict):
            return cls()
        return cls(
            ip_address=data.get("ip_address"),
            country=data.get("country"),
            city=data.get("city"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )


@dataclass(frozen=True)
class DeviceInfo:
    """Parsed User-Agent summary."""
    browser: str
    browser_version: str
    os: str
    device: str
    device_type: str  # mobile | tablet | desktop

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TrendingItem:
    """A content item ranked by page views in the trending window."""
    id: str
    type: str
    title: str
    views: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EmailVerificationResult:
    """Verdict on whether an email address can receive mail."""
    valid: bool
    email: str
    error: Optional[str] = None
    suggestion: Optional[str] = None
    message: Optional[str] = None
    deliverability: Optional[str] = None
    quality_score: Optional[float] = None
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, leaving out fields that were never set."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], email: str) -> "EmailVerificationResult":
        return cls(
            valid=bool(data.get("valid", False)),
            email=data.get("email") or email,
            error=data.get("error"),
            suggestion=data.get("suggestion"),
            message=data.get("message"),
            deliverability=data.get("deliverability"),
            quality_score=optional_float(data.get("quality_score")),
            warning=data.get("warning"),
        )
