"""Redis client configuration and connection management.

Provides async Redis client with connection pooling shared by
every counter operation in the process.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from routegate.config import Settings, settings


PoolKey = tuple[str, int, float]


class RedisPoolHolder:
    """Holder for the Redis connection pools.

    Uses a class attribute to manage module-level state without
    global statements. One pool per distinct connection configuration.
    """

    pools: dict[PoolKey, ConnectionPool] = {}


def _pool_key(config: Settings) -> PoolKey:
    return (
        str(config.redis_url),
        config.redis_max_connections,
        config.rate_limit_store_timeout,
    )


def _get_pool(config: Settings | None = None) -> ConnectionPool:
    """Get or create the Redis connection pool for a configuration.

    Args:
        config: Settings to connect with (default: global settings)
    """
    config = config or settings
    key = _pool_key(config)
    pool = RedisPoolHolder.pools.get(key)
    if pool is None:
        pool = ConnectionPool.from_url(
            str(config.redis_url),
            max_connections=config.redis_max_connections,
            socket_timeout=config.rate_limit_store_timeout,
            socket_connect_timeout=config.rate_limit_store_timeout,
            decode_responses=True,
        )
        RedisPoolHolder.pools[key] = pool
    return pool


@asynccontextmanager
async def redis_client(
    config: Settings | None = None,
) -> AsyncGenerator[redis.Redis, None]:  # type: ignore[type-arg]
    """Context manager for Redis client.

    Usage:
        async with redis_client() as client:
            await client.incr("key")
    """
    client = redis.Redis(connection_pool=_get_pool(config))
    try:
        yield client
    finally:
        await client.aclose()


async def close_redis_pool() -> None:
    """Close every Redis connection pool.

    Call this during application shutdown.
    """
    pools = list(RedisPoolHolder.pools.values())
    RedisPoolHolder.pools.clear()
    for pool in pools:
        await pool.disconnect()
