"""Request validation rules for the RAG AI Service.

Pure functions that check a query for well-formedness before any provider
call is made. Every violated rule is reported; checks never short-circuit,
except for a missing request, which makes every other rule meaningless.

Primary message:
    When several rules fail, ``primary_message`` carries the message of the
    last failing rule in declaration order (text: user query, temperature;
    image: image URL, initial image query, temperature). The full list is
    always available in ``errors``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

from rag_ai.domain.entities import (
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    ImageQuery,
    TextQuery,
)

NULL_REQUEST_MESSAGE = "Request cannot be null"
NULL_REQUEST_ERROR = "Request is null"
USER_QUERY_MESSAGE = "User query is required"
USER_QUERY_ERROR = "UserQuery is required and cannot be empty"
TEMPERATURE_MESSAGE = "Temperature must be between 0 and 2"
IMAGE_URL_MESSAGE = "Image URL is required"
IMAGE_URL_ERROR = "ImageUrl is required and cannot be empty"
IMAGE_URL_FORMAT_MESSAGE = "Invalid image URL format"
IMAGE_URL_FORMAT_ERROR = "ImageUrl must be a valid URL"
INITIAL_IMAGE_QUERY_MESSAGE = "Initial image query is required"
INITIAL_IMAGE_QUERY_ERROR = "InitialImageQuery is required and cannot be empty"


@dataclass(slots=True)
class ValidationOutcome:
    """Result of validating one request.

    Attributes:
        valid: True when no rule failed.
        primary_message: Message of the last failing rule, or "" when valid.
        errors: Every violated rule, in the order the rules were checked.
    """

    valid: bool = True
    primary_message: str = ""
    errors: list[str] = field(default_factory=list)

    def fail(self, message: str, error: str) -> None:
        """Record a violated rule."""
        self.valid = False
        self.primary_message = message
        self.errors.append(error)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _temperature_in_range(value: float) -> bool:
    return TEMPERATURE_MIN <= value <= TEMPERATURE_MAX


def is_absolute_url(value: str) -> bool:
    """Return True when value parses as an absolute URL with scheme and host."""
    candidate = value.strip()
    if any(char.isspace() for char in candidate):
        return False
    try:
        parts = urlsplit(candidate)
        host = parts.hostname
    except ValueError:
        return False
    return bool(parts.scheme) and bool(host)


def validate_text_query(request: TextQuery | None) -> ValidationOutcome:
    """Validate a text query.

    Args:
        request: Query to check. None is reported as a null request.

    Returns:
        ValidationOutcome listing every violated rule.
    """
    outcome = ValidationOutcome()

    if request is None:
        outcome.fail(NULL_REQUEST_MESSAGE, NULL_REQUEST_ERROR)
        return outcome

    if _is_blank(request.user_query):
        outcome.fail(USER_QUERY_MESSAGE, USER_QUERY_ERROR)

    if not _temperature_in_range(request.temperature):
        outcome.fail(TEMPERATURE_MESSAGE, TEMPERATURE_MESSAGE)

    return outcome


def validate_image_query(request: ImageQuery | None) -> ValidationOutcome:
    """Validate an image query.

    Args:
        request: Query to check. None is reported as a null request.

    Returns:
        ValidationOutcome listing every violated rule.
    """
    outcome = ValidationOutcome()

    if request is None:
        outcome.fail(NULL_REQUEST_MESSAGE, NULL_REQUEST_ERROR)
        return outcome

    if _is_blank(request.image_url):
        outcome.fail(IMAGE_URL_MESSAGE, IMAGE_URL_ERROR)
    elif not is_absolute_url(request.image_url):
        outcome.fail(IMAGE_URL_FORMAT_MESSAGE, IMAGE_URL_FORMAT_ERROR)

    if _is_blank(request.initial_image_query):
        outcome.fail(INITIAL_IMAGE_QUERY_MESSAGE, INITIAL_IMAGE_QUERY_ERROR)

    if not _temperature_in_range(request.temperature):
        outcome.fail(TEMPERATURE_MESSAGE, TEMPERATURE_MESSAGE)

    return outcome


__all__ = [
    "ValidationOutcome",
    "is_absolute_url",
    "validate_image_query",
    "validate_text_query",
]
