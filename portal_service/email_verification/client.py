"""
Email verification client with retry and fail-open behaviour.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from ..backend import BackendClient, BackendError
from ..models.results import EmailVerificationResult

logger = logging.getLogger(__name__)

VERIFY_EMAIL_FUNCTION = "verify-email"
UNAVAILABLE_WARNING = "Email verification service temporarily unavailable"

MAX_RETRIES = 3
BASE_DELAY_SECONDS = 1.0

Verifier = Callable[[str], Dict[str, Any]]


def backend_verifier(backend: BackendClient) -> Verifier:
    """Verifier calling the backend's ``verify-email`` function."""
    def verify(email: str) -> Dict[str, Any]:
        return backend.invoke_function(VERIFY_EMAIL_FUNCTION, {"email": email})
    return verify


class EmailVerificationClient:
    """
    Verifies addresses through a remote verifier.

    Transport failures are retried ``max_retries`` times, waiting
    ``base_delay * 2**attempt`` seconds before each retry. When every attempt
    fails the address is allowed through with a warning.
    """

    def __init__(self, verifier: Verifier, max_retries: int = MAX_RETRIES,
                 base_delay: float = BASE_DELAY_SECONDS,
                 sleep: Callable[[float], None] = time.sleep):
        self.verifier = verifier
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.sleep = sleep

    @classmethod
    def from_backend(cls, backend: BackendClient, **kwargs) -> "EmailVerificationClient":
        return cls(backend_verifier(backend), **kwargs)

    def _attempt(self, email: str) -> Optional[EmailVerificationResult]:
        """One call; None means the attempt failed and may be retried."""
        try:
            data = self.verifier(email)
        except BackendError as e:
            # A rejected address comes back as an error status with a verdict body.
            if isinstance(e.payload, dict) and "valid" in e.payload:
                return EmailVerificationResult.from_dict(e.payload, email)
            logger.warning(f"Email verification error for {email}: {e}")
            return None
        except requests.RequestException as e:
            logger.warning(f"Email verification error for {email}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Unexpected email verification response for {email}: {data!r}")
            return None
        return EmailVerificationResult.from_dict(data, email)

    def verify_email(self, email: str) -> EmailVerificationResult:
        normalized = (email or "").strip().lower()

        for attempt in range(self.max_retries + 1):
            result = self._attempt(normalized)
            if result is not None:
                return result
            if attempt < self.max_retries:
                delay = self.base_delay * (2 ** attempt)
                logger.info(f"Retrying email verification in {delay}s (attempt {attempt + 1}/{self.max_retries})")
                self.sleep(delay)

        logger.error(f"Email verification failed after {self.max_retries + 1} attempts; allowing {normalized}")
        return EmailVerificationResult(valid=True, email=normalized, warning=UNAVAILABLE_WARNING)
