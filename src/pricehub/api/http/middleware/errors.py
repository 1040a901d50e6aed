"""Translation of exceptions into the JSON error envelope.

Every error leaves the API as::

    {"error": {"message": ..., "statusCode": ...}}

Outside production the envelope also carries ``errorType`` and ``stack``.
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from loguru import logger
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.pricehub.runtime.context import get_config

INTERNAL_ERROR_MESSAGE = "Internal Server Error"
DB_UNAVAILABLE_MESSAGE = "Database connection failed. Please try again later."

# PostgreSQL SQLSTATE codes
_PG_UNIQUE_VIOLATION = "23505"
_PG_FOREIGN_KEY_VIOLATION = "23503"


def client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def error_response(
    request: Request,
    status_code: int,
    message: Any,
    exc: BaseException,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """Build the error envelope and log the failure with request context."""
    log = logger.bind(
        path=request.url.path,
        method=request.method,
        client_ip=client_ip(request),
        status_code=status_code,
        error_type=type(exc).__name__,
    )
    if status_code >= 500:
        log.opt(exception=exc).error("request.error: {}", message)
    else:
        log.warning("request.error: {}", message)

    config = get_config()
    if status_code == 500 and config.app.environment == "production":
        message = INTERNAL_ERROR_MESSAGE

    body: dict[str, Any] = {"message": message, "statusCode": status_code, **extra}
    if config.expose_error_details:
        body["errorType"] = type(exc).__name__
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    response_headers = dict(headers or {})
    request_id = request.headers.get("X-Request-ID")
    if request_id:
        response_headers.setdefault("X-Request-ID", request_id)

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"error": body}),
        headers=response_headers,
    )


def classify_integrity_error(exc: IntegrityError) -> tuple[int, str]:
    """Map a constraint violation to a status code and client message."""
    pgcode = getattr(exc.orig, "pgcode", None)
    text = str(exc.orig).lower()

    if pgcode == _PG_UNIQUE_VIOLATION or "unique constraint" in text:
        return 409, "A record with this information already exists"
    if pgcode == _PG_FOREIGN_KEY_VIOLATION or "foreign key constraint" in text:
        return 400, "Invalid reference to related record"
    return 400, "Required relation missing"


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message: Any = exc.detail
    # No route matched at all
    if exc.status_code == 404 and "endpoint" not in request.scope:
        message = f"Route {request.method} {request.url.path} not found"
    return error_response(request, exc.status_code, message, exc, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    return error_response(request, 400, "Validation failed", exc, errors=errors)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    status_code, message = classify_integrity_error(exc)
    return error_response(request, status_code, message, exc)


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return error_response(request, 404, "Record not found", exc)


async def database_unavailable_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    return error_response(request, 503, DB_UNAVAILABLE_MESSAGE, exc)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    return error_response(request, 500, "Database error", exc)


def unhandled_exception_response(request: Request, exc: Exception) -> JSONResponse:
    """Response for exceptions no handler claimed; used by the request middleware."""
    return error_response(request, 500, str(exc) or INTERNAL_ERROR_MESSAGE, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NoResultFound, no_result_handler)  # type: ignore[arg-type]
    app.add_exception_handler(OperationalError, database_unavailable_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InterfaceError, database_unavailable_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, database_error_handler)  # type: ignore[arg-type]
