"""Middleware and error handlers for the API.

This module provides FastAPI middleware and global exception handlers for
rate limiting, CORS, structured logging, and error handling.

Key Features:
    - Rate Limiting: Per-endpoint limits using slowapi
    - CORS: Cross-origin resource sharing configuration
    - Structured Logging: One ``http_request`` event per request
    - Error Handling: Every failure path returns an ErrorResponse body

Middleware Stack:
    1. StructuredLoggingMiddleware: Logs all HTTP requests
    2. CORSMiddleware: Handles cross-origin requests
    3. Rate Limiting: Per-endpoint limits via @limiter.limit decorator
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from rag_ai.api.dependencies import SCHEMA_VALIDATION_ERROR, get_request_context
from rag_ai.api.error_handlers import error_response
from rag_ai.application.error_taxonomy import INTERNAL_ERROR_MESSAGE
from rag_ai.telemetry.structured_logging import log_request_event

if TYPE_CHECKING:
    from fastapi import FastAPI

    from rag_ai.infrastructure.config import Settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
DEFAULT_RETRY_AFTER_SECONDS = 60

limiter = Limiter(key_func=get_remote_address)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that emits a structured ``http_request`` event per request.

    Events are written even when the request fails; the failure itself is
    re-raised untouched.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Dispatch HTTP request with structured logging."""
        start_time = time.perf_counter()
        status_code: int | None = None
        error_type: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            error_type = type(exc).__name__
            raise
        finally:
            ctx = get_request_context(request)
            event: dict[str, object] = {
                "event": "http_request",
                "request_id": ctx.request_id,
                "client_ip": ctx.client_ip,
                "project_name": ctx.project_name,
                "path": request.url.path,
                "method": request.method,
                "status_code": status_code,
                "latency_ms": round((time.perf_counter() - start_time) * 1000, 3),
            }
            if error_type:
                event["error_type"] = error_type
            log_request_event(event)


def _cors_origins(raw: str) -> list[str]:
    if raw.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware for the FastAPI application.

    Args:
        app: FastAPI application instance to configure.
        settings: Loaded settings (CORS origins).
    """
    app.add_middleware(StructuredLoggingMiddleware)

    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings.api.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _retry_after(exc: RateLimitExceeded) -> str:
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return str(DEFAULT_RETRY_AFTER_SECONDS)
    return str(item.get_expiry())


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers.

    Registers handlers for:
    - RequestValidationError (400, ``Validation failed``)
    - HTTPException (status kept, ErrorResponse body)
    - RateLimitExceeded (429 with Retry-After)
    - Exception (500, generic message)

    Args:
        app: FastAPI application instance.
    """

    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        ctx = get_request_context(request)
        details = [
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        ]
        logger.warning("validation_error: request_id=%s, errors=%s", ctx.request_id, details)
        return error_response(status.HTTP_400_BAD_REQUEST, SCHEMA_VALIDATION_ERROR, details)

    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict):
            return error_response(
                exc.status_code,
                str(detail.get("error", "")),
                detail.get("details"),
                headers=exc.headers,
            )
        return error_response(exc.status_code, str(detail), headers=exc.headers)

    async def rate_limit_exception_handler(
        request: Request, exc: RateLimitExceeded
    ) -> JSONResponse:
        ctx = get_request_context(request)
        logger.warning(
            "rate_limit_exceeded: request_id=%s, client_ip=%s", ctx.request_id, ctx.client_ip
        )
        return error_response(
            status.HTTP_429_TOO_MANY_REQUESTS,
            RATE_LIMIT_MESSAGE,
            headers={"Retry-After": _retry_after(exc)},
        )

    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        ctx = get_request_context(request)
        logger.exception(
            "unhandled_exception: request_id=%s, error_type=%s",
            ctx.request_id,
            type(exc).__name__,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RateLimitExceeded)(rate_limit_exception_handler)
    app.exception_handler(Exception)(global_exception_handler)


__all__ = [
    "StructuredLoggingMiddleware",
    "limiter",
    "setup_exception_handlers",
    "setup_middleware",
]
