"""Redis-backed view cache infrastructure."""

from shared.cache.redis import close_redis, get_redis, init_redis

__all__ = ["init_redis", "get_redis", "close_redis"]
