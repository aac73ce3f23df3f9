"""
Redis Connection

Async Redis client holding rendered dashboard views and carrying view
invalidation messages.
"""

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from shared.config import Settings, get_settings

logger = structlog.get_logger(__name__)


# Global Redis client
_redis_client: aioredis.Redis | None = None


async def init_redis(settings: Settings | None = None) -> aioredis.Redis:
    """
    Initialize Redis connection.

    Args:
        settings: Connection settings (defaults to the cached process settings)

    Returns:
        aioredis.Redis: Redis client instance
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    settings = settings or get_settings()
    client = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )

    # Verify connection
    try:
        await client.ping()
    except RedisError as e:
        logger.error("Failed to connect to Redis", host=settings.redis_host, error=str(e))
        await client.aclose()
        raise

    _redis_client = client
    logger.info("Redis connection established", host=settings.redis_host, db=settings.redis_db)
    return _redis_client


async def get_redis() -> aioredis.Redis:
    """
    Get Redis client instance.

    Returns:
        aioredis.Redis: Redis client
    """
    if _redis_client is None:
        return await init_redis()

    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis connections closed")
