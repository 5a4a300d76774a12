"""Redis connection management for the shared counter store."""

from routegate.core.cache.redis import (
    RedisPoolHolder,
    close_redis_pool,
    redis_client,
)


__all__ = [
    "RedisPoolHolder",
    "close_redis_pool",
    "redis_client",
]
