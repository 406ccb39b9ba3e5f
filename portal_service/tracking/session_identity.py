"""
Visitor session identity.

A session id is ``"{epoch_ms}-{random base36}"``, created the first time a
client state store is seen and reused for as long as that store lives.
"""

import random
import secrets
from datetime import datetime
from typing import Callable, Optional

from ..kv_store import KeyValueStore
from ..timeutils import to_epoch_ms, utc_now

SESSION_ID_KEY = "visitor_session_id"

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 13


def generate_session_id(now_ms: Optional[int] = None, rng: Optional[random.Random] = None) -> str:
    if now_ms is None:
        now_ms = to_epoch_ms(utc_now())
    choice = rng.choice if rng is not None else secrets.choice
    suffix = "".join(choice(BASE36_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{now_ms}-{suffix}"


class SessionIdentity:
    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utc_now,
                 rng: Optional[random.Random] = None):
        self.store = store
        self.clock = clock
        self.rng = rng

    def get(self) -> Optional[str]:
        value = self.store.get(SESSION_ID_KEY)
        return value if isinstance(value, str) and value else None

    def get_or_create(self) -> str:
        """Return the stored session id, creating and persisting one if absent."""
        session_id = self.get()
        if session_id is None:
            session_id = generate_session_id(to_epoch_ms(self.clock()), self.rng)
            self.store.set(SESSION_ID_KEY, session_id)
        return session_id
