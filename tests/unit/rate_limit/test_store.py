"""Tests for the Redis counter store."""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from routegate.core.errors import StoreUnavailableError
from routegate.core.rate_limit import RedisCounterStore


def make_pipeline(execute_result=None, execute_side_effect=None) -> MagicMock:
    """Build a mock transaction pipeline; queued commands are plain calls."""
    pipe = MagicMock()
    pipe.incr = MagicMock()
    pipe.expire = MagicMock()
    pipe.execute = AsyncMock(
        return_value=execute_result, side_effect=execute_side_effect
    )
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=None)
    return pipe


def make_store(client: MagicMock, timeout: float = 0.5) -> RedisCounterStore:
    """Build a store whose client factory yields the given mock."""

    @asynccontextmanager
    async def factory():
        yield client

    return RedisCounterStore(factory, timeout_seconds=timeout)


class TestRedisCounterStoreCommands:
    """Each operation maps to one Redis command."""

    @pytest.mark.asyncio
    async def test_set_if_not_exists_uses_set_nx_ex(self):
        client = MagicMock()
        client.set = AsyncMock(return_value=True)
        store = make_store(client)

        created = await store.set_if_not_exists("ratelimit:/a", 0, 60)

        assert created is True
        client.set.assert_awaited_once_with("ratelimit:/a", 0, nx=True, ex=60)

    @pytest.mark.asyncio
    async def test_set_if_not_exists_existing_key(self):
        client = MagicMock()
        client.set = AsyncMock(return_value=None)
        store = make_store(client)

        assert await store.set_if_not_exists("ratelimit:/a", 0, 60) is False

    @pytest.mark.asyncio
    async def test_increment_runs_incr_and_expire_nx_in_transaction(self):
        pipe = make_pipeline(execute_result=[4, False])
        client = MagicMock()
        client.pipeline = MagicMock(return_value=pipe)
        store = make_store(client)

        assert await store.increment("ratelimit:/a", 60) == 4
        client.pipeline.assert_called_once_with(transaction=True)
        pipe.incr.assert_called_once_with("ratelimit:/a")
        pipe.expire.assert_called_once_with("ratelimit:/a", 60, nx=True)
        pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ping(self):
        client = MagicMock()
        client.ping = AsyncMock(return_value=True)

        assert await make_store(client).ping() is True


class TestRedisCounterStoreFailures:
    """Failures surface as StoreUnavailableError."""

    @pytest.mark.asyncio
    async def test_connection_error(self):
        pipe = make_pipeline(execute_side_effect=RedisConnectionError("refused"))
        client = MagicMock()
        client.pipeline = MagicMock(return_value=pipe)
        store = make_store(client)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await store.increment("ratelimit:/a", 60)

        assert exc_info.value.details == {
            "operation": "increment",
            "key": "ratelimit:/a",
        }
        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_os_error(self):
        client = MagicMock()
        client.set = AsyncMock(side_effect=OSError("network unreachable"))

        with pytest.raises(StoreUnavailableError):
            await make_store(client).set_if_not_exists("ratelimit:/a", 0, 60)

    @pytest.mark.asyncio
    async def test_timeout(self):
        """A slow round trip is a store failure, not a decision."""

        async def slow_execute():
            await asyncio.sleep(1)
            return [1, True]

        pipe = make_pipeline(execute_side_effect=slow_execute)
        client = MagicMock()
        client.pipeline = MagicMock(return_value=pipe)
        store = make_store(client, timeout=0.01)

        with pytest.raises(StoreUnavailableError):
            await store.increment("ratelimit:/a", 60)

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        pipe = make_pipeline(execute_side_effect=ValueError("bad"))
        client = MagicMock()
        client.pipeline = MagicMock(return_value=pipe)

        with pytest.raises(ValueError):
            await make_store(client).increment("ratelimit:/a", 60)
