"""Root API router with health endpoints."""

from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from routegate.api.dependencies import RateEngine
from routegate.config import Settings
from routegate.core.errors import StoreUnavailableError


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    checks: dict[str, str]


# Create root API router
api_router = APIRouter()

# Health check endpoints
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Kubernetes liveness check. Returns 200 if the process is running.",
)
async def liveness() -> HealthResponse:
    """Liveness check endpoint."""
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Kubernetes readiness check. Checks the counter store.",
)
async def readiness(engine: RateEngine) -> JSONResponse:
    """Readiness check endpoint."""
    checks: dict[str, str] = {}

    try:
        await engine.store.ping()
        checks["store"] = "ok"
    except StoreUnavailableError as e:
        checks["store"] = e.message

    checks["rate_engine"] = "ok" if engine.initialized else "not initialized"

    all_ok = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK
        if all_ok
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_ok else "degraded",
            "checks": checks,
        },
    )


@health_router.get(
    "/info",
    summary="Application info",
)
async def info(request: Request, engine: RateEngine) -> dict[str, Any]:
    """Return application metadata and configured routes."""
    config: Settings = request.app.state.settings
    return {
        "app": config.app_name,
        "environment": config.environment,
        "fail_mode": str(engine.fail_mode),
        "routes": engine.registry.routes(),
    }


api_router.include_router(health_router)
