"""Fixed-window rate decision engine.

Each check primes the route's counter key (`SET NX EX`), increments it
and compares the new count with the route's threshold. Window state lives
entirely in the shared store: when the key expires the count starts over.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from routegate.core.constants import (
    DEFAULT_KEY_PREFIX,
    UNLIMITED_WINDOW_SECONDS,
    FailMode,
)
from routegate.core.errors import StoreUnavailableError
from routegate.core.rate_limit.registry import RouteLimit, RouteRegistry
from routegate.core.rate_limit.store import CounterStore


logger = structlog.get_logger()


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    `limit`, `count` and `remaining` are None when no counter was
    consulted (unrestricted route or fail-open decision).
    """

    allowed: bool
    route: str
    limit: int | None = None
    count: int | None = None
    remaining: int | None = None

    @property
    def restricted(self) -> bool:
        """Whether a counter was consulted for this decision."""
        return self.limit is not None


class RateDecisionEngine:
    """Allow/deny decisions for named routes.

    Construct one engine at startup, call `initialize()` once with the
    static limits, then share the instance with every caller.
    """

    def __init__(
        self,
        store: CounterStore,
        registry: RouteRegistry | None = None,
        *,
        fail_mode: FailMode = FailMode.CLOSED,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Shared counter store
            registry: Route registry (a fresh one by default)
            fail_mode: CLOSED raises StoreUnavailableError on store
                failures, OPEN allows the call
            key_prefix: Namespace for counter keys; empty uses the bare route
        """
        self.store = store
        self.registry = registry if registry is not None else RouteRegistry()
        self.fail_mode = fail_mode
        self.key_prefix = key_prefix
        self._init_lock = asyncio.Lock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _build_key(self, route: str) -> str:
        return f"{self.key_prefix}:{route}" if self.key_prefix else route

    async def initialize(self, limits: Iterable[RouteLimit] = ()) -> None:
        """Load static limits and prime their counters, once.

        Later calls are no-ops. The registry is loaded before any counter
        is primed; if priming fails the engine stays uninitialized and the
        call may be retried.

        Args:
            limits: Static route limits

        Raises:
            StoreUnavailableError: If a counter could not be primed
        """
        async with self._init_lock:
            if self._initialized:
                logger.debug("rate_engine_already_initialized")
                return

            limits = list(limits)
            self.registry.load_static(limits)
            for limit in limits:
                await self.store.set_if_not_exists(
                    self._build_key(limit.route), 0, limit.window_seconds
                )

            self._initialized = True
            logger.info("rate_engine_initialized", routes=len(limits))

    async def check(
        self,
        route: str,
        threshold: int | None = None,
        window_seconds: int | None = None,
    ) -> bool:
        """Decide whether one call to `route` is allowed right now.

        Args:
            route: Route identifier
            threshold: Limit to register if the route is unknown; without
                it, unknown routes are unrestricted
            window_seconds: Window to register with `threshold`

        Returns:
            True if the call is allowed

        Raises:
            InvalidConfigurationError: If a non-positive threshold or
                window is supplied for an unknown route
            StoreUnavailableError: If the store fails under FailMode.CLOSED
        """
        result = await self.evaluate(route, threshold, window_seconds)
        return result.allowed

    async def evaluate(
        self,
        route: str,
        threshold: int | None = None,
        window_seconds: int | None = None,
    ) -> RateLimitResult:
        """Like `check`, but returns the counter details as well."""
        limit = self.registry.lookup(route)
        if limit is None:
            if threshold is None:
                return RateLimitResult(allowed=True, route=route)
            limit = self.registry.register_if_absent(
                route,
                threshold,
                UNLIMITED_WINDOW_SECONDS if window_seconds is None else window_seconds,
            )

        try:
            count = await self._count(limit)
        except StoreUnavailableError:
            logger.warning(
                "store_unavailable",
                route=route,
                fail_mode=str(self.fail_mode),
            )
            if self.fail_mode is FailMode.OPEN:
                return RateLimitResult(allowed=True, route=route)
            raise

        allowed = count <= limit.threshold
        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                route=route,
                limit=limit.threshold,
                count=count,
                window_seconds=limit.window_seconds,
            )

        return RateLimitResult(
            allowed=allowed,
            route=route,
            limit=limit.threshold,
            count=count,
            remaining=max(0, limit.threshold - count),
        )

    async def _count(self, limit: RouteLimit) -> int:
        """Prime the route's counter, then increment it.

        The two commands run strictly in order. If the primed key expires
        between them, INCR recreates it. Every increment carries the window as
        an `EXPIRE NX`, so a key without a TTL gets one on its next increment.
        """
        key = self._build_key(limit.route)
        await self.store.set_if_not_exists(key, 0, limit.window_seconds)
        return await self.store.increment(key, limit.window_seconds)
