"""Stable error taxonomy for the RAG AI Service.

Maps raised failures to an (outcome kind, message) pair that does not depend
on the transport. The HTTP layer turns outcome kinds into status codes; any
other caller (CLI, worker) can reuse the same classification.

Mapping:
    - MissingArgumentError                   -> client-error, generic message
    - InvalidArgumentError / ValueError      -> client-error, exception message
    - UnauthorizedError / PermissionError    -> auth-error
    - UnsupportedOperationError /
      NotImplementedError                    -> client-error
    - TimeoutError (ProviderTimeoutError)    -> timeout-error
    - anything else                          -> internal-error, generic message

Validation failures are classified by classify_validation(): client-error with
the outcome's primary message and every violated rule as details.

Logging:
    Every classification is logged with its context string before it is
    returned. A failure while logging is reported to the module logger and
    otherwise ignored; it never replaces the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from rag_ai.domain.exceptions import (
    InvalidArgumentError,
    MissingArgumentError,
    UnauthorizedError,
    UnsupportedOperationError,
)

if TYPE_CHECKING:
    from rag_ai.application.interfaces import RequestLoggerInterface
    from rag_ai.domain.validation import ValidationOutcome

logger = logging.getLogger(__name__)

INVALID_PARAMETERS_MESSAGE = "Invalid request parameters."
UNAUTHORIZED_MESSAGE = "Unauthorized access."
UNSUPPORTED_MESSAGE = "Operation not supported."
TIMEOUT_MESSAGE = "Request timeout. Please try again."
INTERNAL_ERROR_MESSAGE = "An error occurred while processing your request."


class OutcomeKind(StrEnum):
    """Transport-independent failure category."""

    CLIENT_ERROR = "client-error"
    AUTH_ERROR = "auth-error"
    TIMEOUT_ERROR = "timeout-error"
    INTERNAL_ERROR = "internal-error"


@dataclass(slots=True, frozen=True)
class ErrorOutcome:
    """Classified failure.

    Attributes:
        kind: Failure category.
        message: Caller-facing message. Never contains internal details for
            internal-error outcomes.
        details: Additional caller-facing messages (validation errors).
    """

    kind: OutcomeKind
    message: str
    details: tuple[str, ...] = field(default_factory=tuple)


def _outcome_for(exc: BaseException) -> ErrorOutcome:
    match exc:
        case MissingArgumentError():
            return ErrorOutcome(OutcomeKind.CLIENT_ERROR, INVALID_PARAMETERS_MESSAGE)
        case InvalidArgumentError() | ValueError():
            return ErrorOutcome(OutcomeKind.CLIENT_ERROR, str(exc))
        case UnauthorizedError() | PermissionError():
            return ErrorOutcome(OutcomeKind.AUTH_ERROR, UNAUTHORIZED_MESSAGE)
        case UnsupportedOperationError() | NotImplementedError():
            return ErrorOutcome(OutcomeKind.CLIENT_ERROR, UNSUPPORTED_MESSAGE)
        case TimeoutError():
            return ErrorOutcome(OutcomeKind.TIMEOUT_ERROR, TIMEOUT_MESSAGE)
        case _:
            return ErrorOutcome(OutcomeKind.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)


class ErrorClassifier:
    """Classifies failures and validation outcomes, logging each one.

    Attributes:
        _request_logger: Structured request logger. None limits logging to
            the module logger.
    """

    def __init__(self, request_logger: RequestLoggerInterface | None = None) -> None:
        self._request_logger = request_logger

    def _emit(self, event: dict[str, Any]) -> None:
        if self._request_logger is None:
            return
        try:
            self._request_logger.log_request(event)
        except Exception as log_exc:
            logger.warning("error_event_logging_failed: error=%s", log_exc)

    def classify(
        self,
        exc: BaseException,
        context: str,
        request_id: str | None = None,
    ) -> ErrorOutcome:
        """Classify a raised failure.

        Args:
            exc: The failure to classify.
            context: Short description of what was running (e.g.
                "Query processing"). Logged, never returned to the caller.
            request_id: Request identifier for log correlation.

        Returns:
            ErrorOutcome for the failure kind.
        """
        outcome = _outcome_for(exc)
        # Tracebacks only for unclassified failures; the rest are expected kinds.
        if outcome.kind is OutcomeKind.INTERNAL_ERROR:
            logger.error(
                "Error in %s: %s",
                context,
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
        else:
            logger.error("Error in %s: %s", context, exc)

        self._emit(
            {
                "event": "error_classified",
                "context": context,
                "request_id": request_id,
                "error_type": type(exc).__name__,
                "outcome_kind": str(outcome.kind),
            }
        )
        return outcome

    def classify_validation(
        self,
        validation: ValidationOutcome,
        context: str,
        request_id: str | None = None,
    ) -> ErrorOutcome:
        """Classify a failed validation.

        Args:
            validation: Invalid ValidationOutcome.
            context: Short description of what was being validated.
            request_id: Request identifier for log correlation.

        Returns:
            client-error ErrorOutcome carrying the primary message and every
            violated rule as details.
        """
        logger.warning("Validation failed in %s: %s", context, ", ".join(validation.errors))

        self._emit(
            {
                "event": "validation_failed",
                "context": context,
                "request_id": request_id,
                "errors": list(validation.errors),
            }
        )
        return ErrorOutcome(
            OutcomeKind.CLIENT_ERROR,
            validation.primary_message,
            tuple(validation.errors),
        )


__all__ = [
    "ErrorClassifier",
    "ErrorOutcome",
    "INTERNAL_ERROR_MESSAGE",
    "INVALID_PARAMETERS_MESSAGE",
    "OutcomeKind",
    "TIMEOUT_MESSAGE",
    "UNAUTHORIZED_MESSAGE",
    "UNSUPPORTED_MESSAGE",
]
