"""FastAPI application setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from src.pricehub.api.http.app_data import ApplicationDependencies
from src.pricehub.api.http.middleware.errors import (
    client_ip,
    register_exception_handlers,
    unhandled_exception_response,
)
from src.pricehub.api.http.middleware.limiter import close_rate_limiter
from src.pricehub.api.http.routers import admin, auth, health, prices, products, users
from src.pricehub.api.utils.app_startup import configure_logging
from src.pricehub.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)
from src.pricehub.runtime.context import get_config

# Load configuration
main_config = get_config()


# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title=main_config.app.name,
    lifespan=lifespan,
    docs_url=None if main_config.app.environment == "production" else "/docs",
    redoc_url=None if main_config.app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if main_config.app.environment == "production" and "*" in main_config.app.cors.origins:
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=main_config.app.cors.origins,
    allow_credentials=main_config.app.cors.allow_credentials,
    allow_methods=main_config.app.cors.allow_methods,
    allow_headers=main_config.app.cors.allow_headers,
)

register_exception_handlers(app)


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip(request),
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            # Handled exceptions never get here; this is the last resort
            response = unhandled_exception_response(request, exc)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")

        # Attach correlation id
        response.headers.setdefault("X-Request-ID", request_id)
        return response


# --- Router registration ---
app.include_router(health.router)

api_prefix = main_config.app.api_prefix
app.include_router(auth.router, prefix=api_prefix)
app.include_router(admin.router, prefix=api_prefix)
app.include_router(users.router, prefix=api_prefix)
app.include_router(products.router, prefix=api_prefix)
app.include_router(prices.router, prefix=api_prefix)


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    if not config.jwt.access_secret or not config.jwt.refresh_secret:
        message = "JWT_SECRET and JWT_REFRESH_SECRET must both be set"
        if config.app.environment == "production":
            raise RuntimeError(message)
        logger.warning(message)

    database_service = DbSessionService()
    if database_service.dialect == "sqlite":
        # SQLite is for development: make sure the schema exists
        database_service.create_all()

    app.state.app_dependencies = ApplicationDependencies(
        jwt_verify_service=JwtVerificationService(),
        jwt_generation_service=JwtGeneratorService(),
        database_service=database_service,
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    await close_rate_limiter()
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # We handle access logging in middleware
    )
