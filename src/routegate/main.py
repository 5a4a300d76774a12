"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import partial

import structlog
from fastapi import FastAPI

from routegate.api import api_router
from routegate.config import Settings, settings
from routegate.core.cache.redis import close_redis_pool, redis_client
from routegate.core.errors import (
    StoreUnavailableError,
    register_exception_handlers,
)
from routegate.core.logging import RequestLoggingMiddleware, configure_logging
from routegate.core.rate_limit import (
    CounterStore,
    RateDecisionEngine,
    RedisCounterStore,
    RouteLimit,
)
from routegate.core.rate_limit.middleware import RouteRateLimitMiddleware


# Configure structlog
configure_logging(settings)

logger = structlog.get_logger()


def static_limits(config: Settings) -> list[RouteLimit]:
    """Convert the configured route list into RouteLimit entries."""
    return [
        RouteLimit(
            route=entry.route,
            threshold=entry.threshold,
            window_seconds=entry.window_seconds,
        )
        for entry in config.rate_limit_routes
    ]


def build_rate_engine(
    config: Settings, store: CounterStore | None = None
) -> RateDecisionEngine:
    """Create the process-wide decision engine.

    Args:
        config: Application settings
        store: Counter store; a Redis store connected with `config` when
            omitted
    """
    if store is None:
        store = RedisCounterStore(
            partial(redis_client, config),
            timeout_seconds=config.rate_limit_store_timeout,
        )
    return RateDecisionEngine(
        store,
        fail_mode=config.rate_limit_fail_mode,
        key_prefix=config.rate_limit_prefix,
    )


def create_app(
    config: Settings | None = None,
    store: CounterStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use (default: global settings)
        store: Counter store override, mainly for tests

    Returns:
        Configured FastAPI application instance.
    """
    config = config or settings
    engine = build_rate_engine(config, store)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler.

        Initializes the rate engine on startup and closes the Redis
        pool on shutdown.
        """
        logger.info(
            "application_startup",
            app_name=config.app_name,
            environment=config.environment,
        )

        # Static limits are registered even if priming fails; counters
        # are then primed lazily by the first check.
        try:
            await engine.initialize(static_limits(config))
        except StoreUnavailableError as e:
            logger.warning("rate_engine_init_failed", error=e.message)

        yield

        logger.info("application_shutdown")
        await close_redis_pool()
        logger.info("redis_pool_closed")

    app = FastAPI(
        title=config.app_name,
        description="Fixed-window route rate limiting over a shared Redis counter",
        version="0.1.0",
        debug=config.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not config.is_production else None,
        redoc_url="/redoc" if not config.is_production else None,
        openapi_url="/openapi.json" if not config.is_production else None,
    )
    app.state.settings = config
    app.state.rate_engine = engine

    # Rate limiting runs inside request logging so 429s are logged
    app.add_middleware(RouteRateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(api_router)

    return app
