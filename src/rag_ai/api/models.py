"""Request and response models for the REST API.

This module defines Pydantic v2 models for the REST API request and response
schemas. Field names are snake_case in Python and camelCase on the wire.

Design Principles:
    - Schema only: Models enforce JSON types and length limits. Blank
      required fields and out-of-range temperatures are left to the domain
      validator so callers always get its stable messages.
    - API Documentation: Models auto-generate OpenAPI/Swagger documentation
    - Wire format: camelCase aliases, accepted by name as well

Key Models:
    - Request Models: TextQueryRequest, ImageQueryRequest
    - Response Models: AugmentedAnswerResponse, ImageQueryResponse,
      HealthResponse, ErrorResponse
    - RequestContext: Per-request metadata used for logging
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rag_ai.domain.entities import (
    DEFAULT_FOLLOW_UP_TEMPLATE,
    DEFAULT_INITIAL_IMAGE_QUERY,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
    INITIAL_IMAGE_QUERY_MAX_LENGTH,
    SYSTEM_PROMPT_MAX_LENGTH,
    USER_QUERY_MAX_LENGTH,
)

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class TextQueryRequest(BaseModel):
    """Request body for POST /chat.

    Attributes:
        system_prompt: Assistant instructions. Max 1000 characters.
        user_query: The question. Max 4000 characters; blank values are
            rejected by the validator, not here.
        use_retrieval: Ground the answer in the search index.
        temperature: Sampling temperature. Range checked by the validator.
    """

    model_config = _WIRE_CONFIG

    system_prompt: str = Field(
        DEFAULT_SYSTEM_PROMPT,
        max_length=SYSTEM_PROMPT_MAX_LENGTH,
        description="System prompt",
    )
    user_query: str = Field("", max_length=USER_QUERY_MAX_LENGTH, description="User query")
    use_retrieval: bool = Field(True, description="Use retrieval-augmented generation")
    temperature: float = Field(DEFAULT_TEMPERATURE, description="Sampling temperature (0-2)")


class ImageQueryRequest(BaseModel):
    """Request body for POST /chat-with-image.

    Attributes:
        system_prompt: Assistant instructions. Max 1000 characters.
        initial_image_query: Question asked about the image. Max 1000.
        image_url: Absolute URL of the image.
        follow_up_template: Follow-up query with a ``{0}`` slot for the
            image description.
        temperature: Sampling temperature.
    """

    model_config = _WIRE_CONFIG

    system_prompt: str = Field(
        DEFAULT_SYSTEM_PROMPT,
        max_length=SYSTEM_PROMPT_MAX_LENGTH,
        description="System prompt",
    )
    initial_image_query: str = Field(
        DEFAULT_INITIAL_IMAGE_QUERY,
        max_length=INITIAL_IMAGE_QUERY_MAX_LENGTH,
        description="Question asked about the image",
    )
    image_url: str = Field("", description="Absolute image URL")
    follow_up_template: str = Field(
        DEFAULT_FOLLOW_UP_TEMPLATE,
        description="Follow-up query template; {0} receives the image description",
    )
    temperature: float = Field(DEFAULT_TEMPERATURE, description="Sampling temperature (0-2)")


class CitationModel(BaseModel):
    """A source reported by the retrieval backend."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., description="Source title")
    url: str = Field(..., description="Source URL")


class AugmentedAnswerResponse(BaseModel):
    """Response model for POST /chat."""

    model_config = ConfigDict(extra="forbid")

    answer: str = Field(..., description="Answer text")
    citations: list[CitationModel] = Field(default_factory=list, description="Sources")


class ImageQueryResponse(BaseModel):
    """Response model for POST /chat-with-image.

    Attributes:
        image_response: Raw answer about the image (``imageResponse``).
        follow_up_response: Retrieval-augmented follow-up answer
            (``followUpResponse``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    image_response: str = Field(..., description="Answer about the image")
    follow_up_response: AugmentedAnswerResponse = Field(..., description="Follow-up answer")


class HealthResponse(BaseModel):
    """Response model for health check endpoint.

    Attributes:
        status: Always "healthy" when the service can answer.
        provider: Active completion provider mode ("live" or "in_memory").
        version: API version string.
    """

    model_config = ConfigDict(extra="forbid")

    status: Literal["healthy", "unhealthy"] = Field(..., description="Service status")
    provider: str = Field(..., description="Completion provider mode")
    version: str = Field(..., description="API version")


class ErrorResponse(BaseModel):
    """Standardized error body returned by every failure path.

    Attributes:
        error: Human-readable error message.
        details: Individual validation messages. None outside validation
            failures and omitted from the JSON body.
    """

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message")
    details: list[str] | None = Field(None, description="Validation error details")


@dataclass(slots=True, frozen=True)
class RequestContext:
    """Context for tracking API requests.

    Attributes:
        request_id: Unique request identifier (UUID string).
        client_ip: Client IP address extracted from request.
        user_agent: User-Agent header value. None if not present.
        project_name: Project name from X-Project-Name header. None if not present.
    """

    request_id: str
    client_ip: str
    user_agent: str | None = None
    project_name: str | None = None


__all__ = [
    "AugmentedAnswerResponse",
    "CitationModel",
    "ErrorResponse",
    "HealthResponse",
    "ImageQueryRequest",
    "ImageQueryResponse",
    "RequestContext",
    "TextQueryRequest",
]
