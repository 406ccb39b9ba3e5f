"""Timestamp helpers. All stored timestamps are UTC ISO-8601 strings."""

import re
from datetime import datetime, timezone
from typing import Optional, Union

# PostgREST trims trailing zeros from microseconds; fromisoformat before 3.11 wants 3 or 6 digits.
_FRACTION = re.compile(r"\.(\d{1,6})\d*(?=[+-]\d{2}:?\d{2}$|$)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def parse_iso(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO timestamp (``Z`` suffix accepted). Returns None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0"), text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
