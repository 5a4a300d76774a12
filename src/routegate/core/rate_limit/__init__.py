"""Rate limiting with a Redis fixed-window counter.

Provides per-route limits from static configuration or dynamic
registration, enforced across processes through a shared store.
"""

from routegate.core.constants import FailMode
from routegate.core.rate_limit.engine import RateDecisionEngine, RateLimitResult
from routegate.core.rate_limit.registry import RouteLimit, RouteRegistry
from routegate.core.rate_limit.store import CounterStore, RedisCounterStore


__all__ = [
    "CounterStore",
    "FailMode",
    "RateDecisionEngine",
    "RateLimitResult",
    "RedisCounterStore",
    "RouteLimit",
    "RouteRegistry",
]
