from .redis_denylist_store import RedisTokenDenylistStore

__all__ = ["RedisTokenDenylistStore"]
