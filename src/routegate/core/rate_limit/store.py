"""Shared counter store used by the decision engine.

Every mutation is a single atomic Redis command, so races between
processes are settled by Redis rather than by this module.
"""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, TypeVar

import structlog
from redis.exceptions import RedisError

from routegate.core.cache.redis import redis_client
from routegate.core.constants import DEFAULT_STORE_TIMEOUT_SECONDS
from routegate.core.errors import StoreUnavailableError


logger = structlog.get_logger()

T = TypeVar("T")

ClientFactory = Callable[[], AbstractAsyncContextManager[Any]]


class CounterStore(Protocol):
    """Atomic counter operations the engine relies on."""

    async def set_if_not_exists(self, key: str, value: int, ttl_seconds: int) -> bool:
        """Create the key with a TTL only when it is absent."""
        ...

    async def increment(self, key: str, ttl_seconds: int) -> int:
        """Increment the key, set a TTL if it has none, return the count."""
        ...

    async def ping(self) -> bool:
        """Check connectivity."""
        ...


class RedisCounterStore:
    """CounterStore backed by Redis.

    Uses `SET NX EX` for priming and a `MULTI` of `INCR` and `EXPIRE NX`
    (Redis 7+) for counting, so every increment restores a missing TTL.
    Each round trip is bounded by `timeout_seconds`; timeouts and
    connection errors are raised as StoreUnavailableError.
    """

    def __init__(
        self,
        client_factory: ClientFactory = redis_client,
        *,
        timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the store.

        Args:
            client_factory: Callable returning an async context manager
                that yields a Redis client
            timeout_seconds: Upper bound for each store round trip
        """
        self._client_factory = client_factory
        self.timeout_seconds = timeout_seconds

    async def _run(
        self,
        operation: str,
        key: str,
        command: Callable[[Any], Awaitable[T]],
    ) -> T:
        """Run one command against Redis, translating failures."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                async with self._client_factory() as client:
                    return await command(client)
        except (RedisError, OSError, TimeoutError) as exc:
            logger.warning(
                "store_command_failed",
                operation=operation,
                key=key,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise StoreUnavailableError(
                details={"operation": operation, "key": key}
            ) from exc

    async def set_if_not_exists(self, key: str, value: int, ttl_seconds: int) -> bool:
        """Prime a counter key.

        Args:
            key: Counter key
            value: Initial value
            ttl_seconds: Expiry applied only when the key is created

        Returns:
            True if the key was created, False if it already existed
        """
        result = await self._run(
            "set_if_not_exists",
            key,
            lambda client: client.set(key, value, nx=True, ex=ttl_seconds),
        )
        return bool(result)

    async def increment(self, key: str, ttl_seconds: int) -> int:
        """Atomically increment a counter key.

        `EXPIRE NX` runs in the same transaction, so a key that INCR
        recreated after its window expired never stays without a TTL.
        Keys that already have a TTL keep it.

        Args:
            key: Counter key
            ttl_seconds: Expiry applied only when the key has none

        Returns:
            The post-increment value
        """

        async def incr_with_expiry(client: Any) -> Any:
            async with client.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, ttl_seconds, nx=True)
                results = await pipe.execute()
            return results[0]

        result = await self._run("increment", key, incr_with_expiry)
        return int(result)

    async def ping(self) -> bool:
        """Check store connectivity.

        Raises:
            StoreUnavailableError: If Redis cannot be reached
        """
        result = await self._run("ping", "", lambda client: client.ping())
        return bool(result)

