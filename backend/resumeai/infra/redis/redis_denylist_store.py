import hashlib
from typing import cast

import redis  # type: ignore[import-untyped]

from resumeai.services._shared.ports import TokenDenylistStore


class RedisTokenDenylistStore(TokenDenylistStore):
    """
    Denylist for **refresh tokens** backed by Redis key expiry.

    Tokens are keyed by their SHA-256 digest so raw tokens never reach Redis.
    """

    def __init__(self, r: redis.Redis):
        self.r = r

    @staticmethod
    def _k(token: str) -> str:
        return f"deny:rt:{hashlib.sha256(token.encode('utf-8')).hexdigest()}"

    def is_revoked(self, token: str) -> bool:
        return cast(int, self.r.exists(self._k(token))) == 1

    def revoke(self, token: str, *, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        # store a small marker with TTL; idempotent
        self.r.set(self._k(token), "1", ex=int(ttl_seconds))
