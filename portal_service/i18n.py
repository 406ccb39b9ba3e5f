"""Bilingual field helpers. Albanian (``sq``) is the default language."""

from typing import Any, Dict, Optional

LANGUAGES = ("sq", "en")
DEFAULT_LANGUAGE = "sq"


def resolve_language(value: Optional[str], default: str = DEFAULT_LANGUAGE) -> str:
    value = (value or "").strip().lower()
    return value if value in LANGUAGES else default


def pick(sq: Any, en: Any, lang: str) -> Any:
    return en if lang == "en" else sq


def localized(record: Dict[str, Any], field: str, lang: str) -> Any:
    """Value of ``{field}_{lang}``, e.g. ``title_en``."""
    return record.get(f"{field}_{lang}")
