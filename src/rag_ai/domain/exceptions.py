"""Domain exceptions for the RAG AI Service.

This module defines pure domain exceptions with no framework dependencies.
Each exception marks one failure kind of the service's error taxonomy, so the
HTTP boundary can classify a failure without inspecting provider SDK types.

Design Principles:
    - Framework-agnostic: No FastAPI, Pydantic, or SDK dependencies
    - Taxonomy-aligned: One exception per outcome-relevant failure kind
    - Builtin-compatible: Each kind also subclasses the matching builtin
      exception, so plain ``ValueError``/``TimeoutError`` raised by third-party
      code is classified the same way

Exception Hierarchy:
    - DomainError: Base exception for all domain errors
    - InvalidArgumentError: Malformed (non-null) argument
    - MissingArgumentError: Null or missing required argument
    - UnauthorizedError: Backend rejected credentials or access
    - UnsupportedOperationError: Operation not supported by a provider
    - ProviderTimeoutError: Backend call timed out
    - ConfigurationError: Incomplete or invalid startup configuration
"""


class DomainError(Exception):
    """Base exception for all domain errors.

    This exception should not be raised directly. Use a specific subclass.
    """


class InvalidArgumentError(DomainError, ValueError):
    """Raised when an argument is present but malformed.

    The exception message is surfaced to the caller verbatim, so it must not
    contain secrets or internal details.

    Common causes:
        - Follow-up template without a substitution slot
        - Backend rejected request parameters (HTTP 400 from the provider)
    """


class MissingArgumentError(InvalidArgumentError):
    """Raised when a required argument is None or absent.

    Classified separately from InvalidArgumentError: the caller receives a
    generic message instead of the exception text.
    """


class UnauthorizedError(DomainError, PermissionError):
    """Raised when the completion backend rejects credentials or access."""


class UnsupportedOperationError(DomainError, NotImplementedError):
    """Raised when a provider cannot perform the requested operation."""


class ProviderTimeoutError(DomainError, TimeoutError):
    """Raised when the completion backend does not answer in time.

    Note:
        The orchestration layer never raises this itself. Only providers do,
        after their own client-side timeout elapses.
    """


class ConfigurationError(DomainError):
    """Raised at startup when required configuration values are missing."""
