"""
Local email address checks run before any network verification.
"""

import re
from typing import Optional, Tuple

INVALID_FORMAT = "Please enter a valid email address"
DISPOSABLE_OR_MALFORMED = "Please use a valid, non-disposable email address"
SUSPICIOUS = "This email address appears to be invalid or for testing only"

DISPOSABLE_DOMAINS = [
    "tempmail.com", "guerrillamail.com", "10minutemail.com", "throwaway.email",
    "mailinator.com", "trashmail.com", "fakeinbox.com", "yopmail.com",
    "getnada.com", "temp-mail.org", "maildrop.cc", "sharklasers.com",
    "spam4.me", "mintemail.com", "emailondeck.com", "dispostable.com",
]

TYPO_DOMAINS = {"gmial.com", "gmai.com", "yahooo.com", "hotmial.com"}

EMAIL_PATTERN = re.compile(r"^[a-z0-9.!#$%&'*+/=?^_`{|}~-]+@(?:[a-z0-9-]+\.)+[a-z0-9-]{2,}$")
TEST_PATTERN = re.compile(r"^(test|demo|fake|spam|noreply|example)\d*@", re.IGNORECASE)

MAX_EMAIL_LENGTH = 254
MAX_LOCAL_LENGTH = 64
MAX_DOMAIN_LENGTH = 253
DIGIT_RATIO_LIMIT = 0.7


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _structure_ok(email: str) -> bool:
    if len(email) > MAX_EMAIL_LENGTH:
        return False

    local_part, _, domain = email.partition("@")

    if not local_part or len(local_part) > MAX_LOCAL_LENGTH:
        return False
    if local_part.startswith(".") or local_part.endswith(".") or ".." in local_part:
        return False

    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return False
    if domain.startswith(".") or domain.endswith(".") or ".." in domain:
        return False

    labels = domain.split(".")
    if len(labels) < 2 or not 2 <= len(labels[-1]) <= 63:
        return False

    if any(domain.endswith(disposable) for disposable in DISPOSABLE_DOMAINS):
        return False
    return domain not in TYPO_DOMAINS


def _looks_genuine(email: str) -> bool:
    local_part = email.split("@")[0]
    digits = sum(1 for char in local_part if char.isdigit())
    if digits > len(local_part) * DIGIT_RATIO_LIMIT:
        return False
    return not TEST_PATTERN.match(email)


def validate_email(email: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an address without touching the network.

    Returns:
        ``(True, None)`` or ``(False, message)`` with the first failing rule's message
    """
    normalized = normalize_email(email)
    if not EMAIL_PATTERN.match(normalized):
        return False, INVALID_FORMAT
    if not _structure_ok(normalized):
        return False, DISPOSABLE_OR_MALFORMED
    if not _looks_genuine(normalized):
        return False, SUSPICIOUS
    return True, None
