"""Unit tests for Redis connection management."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from routegate.config import Settings
from routegate.core.cache.redis import (
    RedisPoolHolder,
    _get_pool,
    close_redis_pool,
    redis_client,
)


@pytest.fixture(autouse=True)
def reset_redis_pool():
    """Reset Redis pool holder before each test."""
    RedisPoolHolder.pools = {}
    yield
    RedisPoolHolder.pools = {}


class TestRedisPoolManagement:
    """Tests for Redis connection pool management."""

    def test_get_pool_creates_pool(self):
        """Verify pool is created on first access."""
        pool = _get_pool()
        assert pool is not None
        assert list(RedisPoolHolder.pools.values()) == [pool]

    def test_get_pool_returns_existing_pool(self):
        """Verify same pool is returned on subsequent calls."""
        assert _get_pool() is _get_pool()

    def test_pool_built_from_given_settings(self):
        config = Settings(
            _env_file=None,
            redis_url="redis://cache:6380/2",
            redis_max_connections=7,
            rate_limit_store_timeout=0.25,
        )

        pool = _get_pool(config)

        assert pool.max_connections == 7
        assert pool.connection_kwargs["socket_timeout"] == 0.25
        assert pool.connection_kwargs["host"] == "cache"
        assert pool.connection_kwargs["port"] == 6380

    def test_distinct_settings_get_distinct_pools(self):
        first = Settings(_env_file=None, redis_url="redis://one:6379")
        second = Settings(_env_file=None, redis_url="redis://two:6379")

        assert _get_pool(first) is not _get_pool(second)
        assert _get_pool(first) is _get_pool(
            Settings(_env_file=None, redis_url="redis://one:6379")
        )

    @pytest.mark.asyncio
    async def test_close_disconnects_and_clears(self):
        first = MagicMock()
        first.disconnect = AsyncMock()
        second = MagicMock()
        second.disconnect = AsyncMock()
        RedisPoolHolder.pools = {("a", 1, 0.5): first, ("b", 1, 0.5): second}

        await close_redis_pool()

        first.disconnect.assert_awaited_once()
        second.disconnect.assert_awaited_once()
        assert RedisPoolHolder.pools == {}

    @pytest.mark.asyncio
    async def test_close_without_pool_is_noop(self):
        await close_redis_pool()
        assert RedisPoolHolder.pools == {}


class TestRedisClientContextManager:
    """Tests for redis_client context manager."""

    @pytest.mark.asyncio
    async def test_client_closed_on_exit(self):
        mock_client = MagicMock()
        mock_client.aclose = AsyncMock()

        with patch(
            "routegate.core.cache.redis.redis.Redis", return_value=mock_client
        ):
            async with redis_client() as client:
                assert client is mock_client

        mock_client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_uses_given_settings(self):
        config = Settings(_env_file=None, redis_url="redis://other-host:6390/3")

        async with redis_client(config) as client:
            kwargs = client.connection_pool.connection_kwargs

        assert kwargs["host"] == "other-host"
        assert kwargs["db"] == 3
