"""HTTP rendering of classified errors.

Route handlers classify failures with ErrorClassifier; this module turns the
resulting ErrorOutcome into a JSON response with the status code for its
outcome kind.

Status Mapping:
    - client-error   -> 400 Bad Request
    - auth-error     -> 401 Unauthorized
    - timeout-error  -> 408 Request Timeout
    - internal-error -> 500 Internal Server Error
"""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import status
from fastapi.responses import JSONResponse

from rag_ai.api.models import ErrorResponse
from rag_ai.application.error_taxonomy import ErrorOutcome, OutcomeKind


def status_for_outcome(kind: OutcomeKind) -> int:
    """Map an outcome kind to its HTTP status code."""
    match kind:
        case OutcomeKind.CLIENT_ERROR:
            return status.HTTP_400_BAD_REQUEST
        case OutcomeKind.AUTH_ERROR:
            return status.HTTP_401_UNAUTHORIZED
        case OutcomeKind.TIMEOUT_ERROR:
            return status.HTTP_408_REQUEST_TIMEOUT
        case _:
            return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    status_code: int,
    error: str,
    details: Sequence[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a JSON error response.

    ``details`` is omitted from the body when empty or None.
    """
    body = ErrorResponse(error=error, details=list(details) if details else None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def outcome_response(outcome: ErrorOutcome) -> JSONResponse:
    """Render a classified failure."""
    return error_response(status_for_outcome(outcome.kind), outcome.message, outcome.details)


__all__ = ["error_response", "outcome_response", "status_for_outcome"]
