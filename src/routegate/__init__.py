"""Fixed-window route rate limiting backed by a shared Redis counter."""

from routegate.core.rate_limit import (
    FailMode,
    RateDecisionEngine,
    RateLimitResult,
    RedisCounterStore,
    RouteLimit,
    RouteRegistry,
)


__all__ = [
    "FailMode",
    "RateDecisionEngine",
    "RateLimitResult",
    "RedisCounterStore",
    "RouteLimit",
    "RouteRegistry",
]
