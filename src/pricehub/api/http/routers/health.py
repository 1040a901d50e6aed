"""Health check endpoints router for monitoring service availability."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.pricehub.api.http.app_data import ApplicationDependencies
from src.pricehub.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is serving requests."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    db_healthy = app_deps.database_service.health_check()
    checks = {
        "database": {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": app_deps.database_service.dialect,
        }
    }

    response = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": config.app.environment,
        "timestamp": datetime.now(UTC).isoformat(),
        "checks": checks,
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
