"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from routegate.config import RouteLimitConfig, Settings
from routegate.core.rate_limit import RateDecisionEngine
from routegate.main import create_app
from tests.fakes import FakeCounterStore
from tests.routes import test_router


@pytest.fixture
def store() -> FakeCounterStore:
    """Provide an empty in-memory counter store."""
    return FakeCounterStore()


@pytest.fixture
def engine(store: FakeCounterStore) -> RateDecisionEngine:
    """Provide an engine over the fake store with a bare-route key prefix."""
    return RateDecisionEngine(store, key_prefix="")


@pytest.fixture
def app_settings() -> Settings:
    """Settings with one statically limited route."""
    return Settings(
        environment="testing",
        rate_limit_routes=[
            RouteLimitConfig(route="/limited", threshold=2, window_seconds=60),
        ],
    )


@pytest.fixture
def app(app_settings: Settings, store: FakeCounterStore) -> FastAPI:
    """Create an application wired to the fake store."""
    application = create_app(app_settings, store=store)
    application.include_router(test_router)
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client with the application lifespan running."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
