from __future__ import annotations

import threading
import time
from typing import Protocol


class TokenDenylistStore(Protocol):
    """
    Abstraction for a denylist of revoked **refresh tokens**.

    Entries expire on their own once the token they shadow would have expired,
    so the store never grows past the set of still-valid revoked tokens.
    Methods are expected to be idempotent.
    """

    def revoke(self, token: str, *, ttl_seconds: int) -> None: ...
    def is_revoked(self, token: str) -> bool: ...


class InMemoryTokenDenylistStore(TokenDenylistStore):
    """Process-local denylist honouring per-entry expiry.

    Used when no ``REDIS_URL`` is configured and in unit tests.
    """

    def __init__(self) -> None:
        self._revoked: dict[str, float] = {}
        self._lock = threading.Lock()

    def revoke(self, token: str, *, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            self._revoked[token] = time.time() + ttl_seconds

    def is_revoked(self, token: str) -> bool:
        with self._lock:
            deadline = self._revoked.get(token)
            if deadline is None:
                return False
            if deadline <= time.time():
                del self._revoked[token]
                return False
            return True
