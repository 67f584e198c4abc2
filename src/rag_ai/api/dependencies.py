"""Dependency injection for FastAPI endpoints.

This module provides FastAPI dependencies for the query orchestrator, the
error classifier, and the infrastructure they wrap. All dependencies are
injected via FastAPI's Depends() system.

Design Principles:
    - Dependency Injection: All components injected via FastAPI Depends()
    - Lifecycle Management: Dependencies initialized during lifespan startup
    - Error Handling: Returns 503 if dependencies not initialized

Dependency Flow:
    1. Lifespan startup builds the provider and request logger
    2. set_dependencies() stores the instances
    3. get_*() functions retrieve instances (raise 503 if not initialized)
    4. get_orchestrator() / get_error_classifier() build per-request services
    5. FastAPI Depends() wires everything together
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel, ValidationError
from slowapi.util import get_remote_address

from rag_ai.api.models import RequestContext
from rag_ai.application.error_taxonomy import ErrorClassifier
from rag_ai.application.interfaces import (
    CompletionProviderInterface,
    RequestLoggerInterface,
)
from rag_ai.application.use_cases import QueryOrchestrator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

SCHEMA_VALIDATION_ERROR = "Validation failed"

# Global instances (initialized in lifespan)
_provider: CompletionProviderInterface | None = None
_request_logger: RequestLoggerInterface | None = None
_provider_name: str | None = None


def set_dependencies(
    provider: CompletionProviderInterface,
    request_logger: RequestLoggerInterface,
    provider_name: str,
) -> None:
    """Set global dependencies (called during lifespan startup).

    Args:
        provider: Completion provider shared by all requests.
        request_logger: Structured request logger.
        provider_name: Provider mode reported by /health.
    """
    global _provider, _request_logger, _provider_name
    _provider = provider
    _request_logger = request_logger
    _provider_name = provider_name


def clear_dependencies() -> None:
    """Forget global dependencies (called during lifespan shutdown)."""
    global _provider, _request_logger, _provider_name
    _provider = None
    _request_logger = None
    _provider_name = None


def get_provider() -> CompletionProviderInterface:
    """Get the completion provider.

    Raises:
        HTTPException: 503 if the provider is not initialized.
    """
    if _provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Completion provider not initialized",
        )
    return _provider


def get_request_logger() -> RequestLoggerInterface:
    """Get the request logger.

    Raises:
        HTTPException: 503 if the logger is not initialized.
    """
    if _request_logger is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Request logger not initialized",
        )
    return _request_logger


def get_provider_name() -> str:
    """Get the active provider mode.

    Raises:
        HTTPException: 503 if the service has not finished starting.
    """
    if _provider_name is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _provider_name


def get_request_context(request: Request) -> RequestContext:
    """Extract (or reuse) request context from FastAPI request.

    The context is cached in request.state so middleware, dependencies and
    route handlers share the same request_id.

    Args:
        request: FastAPI Request object.

    Returns:
        RequestContext for this request.
    """
    ctx: RequestContext | None = getattr(request.state, "request_context", None)
    if ctx is None:
        ctx = RequestContext(
            request_id=str(uuid.uuid4()),
            client_ip=get_remote_address(request),
            user_agent=request.headers.get("user-agent"),
            project_name=request.headers.get("x-project-name"),
        )
        request.state.request_context = ctx
    return ctx


def get_error_classifier(
    request_logger: Annotated[RequestLoggerInterface, Depends(get_request_logger)],
) -> ErrorClassifier:
    """Get an ErrorClassifier writing to the request logger."""
    return ErrorClassifier(request_logger=request_logger)


def get_orchestrator(
    provider: Annotated[CompletionProviderInterface, Depends(get_provider)],
    request_logger: Annotated[RequestLoggerInterface, Depends(get_request_logger)],
) -> QueryOrchestrator:
    """Get a QueryOrchestrator over the shared provider.

    Args:
        provider: Completion provider (injected).
        request_logger: Request logger (injected).

    Returns:
        QueryOrchestrator instance for this request.
    """
    return QueryOrchestrator(provider=provider, request_logger=request_logger)


# ============================================================================
# Request Parsing
# ============================================================================


def _format_validation_errors(exc: ValidationError) -> list[str]:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)
    return details


def _schema_error(details: list[str]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": SCHEMA_VALIDATION_ERROR, "details": details},
    )


async def parse_request_body(request: Request, model_cls: type[T]) -> T | None:
    """Parse the JSON request body into a Pydantic model.

    An empty body or a JSON ``null`` yields None, which the domain
    validator reports as a null request.

    Args:
        request: FastAPI Request object.
        model_cls: Pydantic model class to validate against.

    Returns:
        Validated model instance, or None for a missing body.

    Raises:
        HTTPException: 400 with ``{"error": "Validation failed", "details": [...]}``
            if the body is not JSON or does not match the schema.
    """
    body_bytes = await request.body()
    if not body_bytes.strip():
        return None

    try:
        body = json.loads(body_bytes)
    except ValueError as exc:
        logger.warning("request_body_not_json: error=%s", exc)
        raise _schema_error([f"Invalid JSON in request body: {exc!s}"]) from exc

    if body is None:
        return None

    try:
        return model_cls.model_validate(body)
    except ValidationError as exc:
        details = _format_validation_errors(exc)
        logger.warning("request_schema_invalid: errors=%s", details)
        raise _schema_error(details) from exc


__all__ = [
    "SCHEMA_VALIDATION_ERROR",
    "clear_dependencies",
    "get_error_classifier",
    "get_orchestrator",
    "get_provider",
    "get_provider_name",
    "get_request_context",
    "get_request_logger",
    "parse_request_body",
    "set_dependencies",
]
