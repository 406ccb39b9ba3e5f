"""
Email deliverability verdicts from AbstractAPI email validation responses.

``build_verdict`` turns the raw response into an EmailVerificationResult;
``AbstractApiVerifier`` calls the API directly and is used when the portal
verifies addresses itself instead of through the backend function.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..models.results import EmailVerificationResult, optional_float

logger = logging.getLogger(__name__)

ABSTRACTAPI_URL = "https://emailvalidation.abstractapi.com/v1/"
QUALITY_THRESHOLD = 0.8


def _flag(data: Dict[str, Any], name: str) -> Optional[bool]:
    """AbstractAPI wraps booleans as ``{"value": bool, "text": str}``."""
    value = data.get(name)
    if isinstance(value, dict):
        value = value.get("value")
    return value if value is None else bool(value)


def build_verdict(email: str, data: Dict[str, Any]) -> EmailVerificationResult:
    """
    Apply the deliverability checks in order; the first failing check wins.

    Order: format, disposable domain, UNDELIVERABLE, MX record, SMTP check,
    quality score below 0.8.
    """
    deliverability = data.get("deliverability")
    quality_score = optional_float(data.get("quality_score"))

    error = None
    if not _flag(data, "is_valid_format"):
        error = "Invalid email format"
    elif _flag(data, "is_disposable_email"):
        error = "Disposable email addresses are not allowed"
    elif deliverability == "UNDELIVERABLE":
        error = "This email address does not exist or cannot receive emails"
    elif not _flag(data, "is_mx_found"):
        error = "Email domain does not have valid mail servers"
    elif _flag(data, "is_smtp_valid") is False:
        error = "This email address does not exist"
    elif quality_score is not None and quality_score < QUALITY_THRESHOLD:
        error = "This email address has a low quality score and may not be valid"

    result = EmailVerificationResult(
        valid=error is None,
        email=email,
        error=error,
        deliverability=deliverability,
        quality_score=quality_score,
    )

    autocorrect = data.get("autocorrect")
    if autocorrect and autocorrect != email:
        result.suggestion = autocorrect
        result.message = f"Did you mean {autocorrect}?"

    return result


class AbstractApiVerifier:
    """Callable verifier: ``verifier(email) -> dict`` in the verdict shape."""

    def __init__(self, api_key: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None, url: str = ABSTRACTAPI_URL):
        if not api_key:
            raise ValueError("AbstractAPI key is required")
        self.api_key = api_key
        self.timeout = timeout
        self.url = url
        self.session = session or requests.Session()

    def __call__(self, email: str) -> Dict[str, Any]:
        logger.info(f"Verifying email: {email}")
        response = self.session.get(
            self.url, params={"api_key": self.api_key, "email": email}, timeout=self.timeout,
        )
        response.raise_for_status()
        verdict = build_verdict(email, response.json())
        logger.info(
            f"Verification result for {email}: valid={verdict.valid} "
            f"deliverability={verdict.deliverability} quality_score={verdict.quality_score}"
        )
        return verdict.to_dict()
