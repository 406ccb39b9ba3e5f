"""
Email address validation (local rules) and verification (remote, fail-open).
"""

from .client import UNAVAILABLE_WARNING, EmailVerificationClient, backend_verifier
from .validation import normalize_email, validate_email
from .verdict import AbstractApiVerifier, build_verdict

__all__ = [
    "UNAVAILABLE_WARNING",
    "EmailVerificationClient",
    "backend_verifier",
    "normalize_email",
    "validate_email",
    "AbstractApiVerifier",
    "build_verdict",
]
