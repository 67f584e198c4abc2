"""Domain entities for the RAG AI Service.

This module defines pure domain models representing the service's requests
and answers with no framework or infrastructure dependencies. All entities
are request-scoped value objects: nothing here outlives a single call.

Design Principles:
    - Immutability: All entities are frozen dataclasses (slots=True)
    - No I/O: Entities contain no file/network operations
    - Framework-agnostic: No FastAPI, Pydantic, or SDK deps
    - Validation lives in rag_ai.domain.validation, not in __post_init__,
      so that every violated rule can be reported at once

Key Entities:
    - TextQuery: Single-shot text query with optional retrieval
    - ImageQuery: Image description query chained into a follow-up
    - Citation: Retrieval source reference (title, url)
    - AugmentedAnswer: Answer text plus citations
    - ImageFollowUpResult: Image answer plus the follow-up AugmentedAnswer
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
"""System prompt used when a request does not provide one."""

DEFAULT_INITIAL_IMAGE_QUERY = "What is shown in this image?"
"""Image question used when a request does not provide one."""

DEFAULT_FOLLOW_UP_TEMPLATE = "Tell me more about: {0}"
"""Follow-up template used when a request does not provide one."""

DEFAULT_TEMPERATURE = 0.2
"""Sampling temperature used when a request does not provide one."""

TEMPERATURE_MIN = 0.0
"""Minimum allowed temperature value (inclusive)."""

TEMPERATURE_MAX = 2.0
"""Maximum allowed temperature value (inclusive)."""

SYSTEM_PROMPT_MAX_LENGTH = 1000
"""Maximum character length for system prompts (inclusive)."""

USER_QUERY_MAX_LENGTH = 4000
"""Maximum character length for text user queries (inclusive)."""

INITIAL_IMAGE_QUERY_MAX_LENGTH = 1000
"""Maximum character length for initial image queries (inclusive)."""


@dataclass(slots=True, frozen=True)
class TextQuery:
    """Text query, optionally grounded by retrieval.

    Attributes:
        user_query: The user's question. Required; blank values are rejected
            by validate_text_query.
        system_prompt: Instructions that set the assistant's behavior.
        use_retrieval: Whether to attach the configured retrieval source.
        temperature: Sampling temperature. Valid range is [0, 2].
    """

    user_query: str
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    use_retrieval: bool = True
    temperature: float = DEFAULT_TEMPERATURE


@dataclass(slots=True, frozen=True)
class ImageQuery:
    """Image query whose answer seeds a retrieval-augmented follow-up.

    Attributes:
        image_url: Absolute URL of the image to describe.
        initial_image_query: Question asked about the image.
        follow_up_template: Template for the follow-up query. ``{0}`` is
            replaced with the image description.
        system_prompt: Instructions shared by both phases.
        temperature: Sampling temperature shared by both phases.
    """

    image_url: str
    initial_image_query: str = DEFAULT_INITIAL_IMAGE_QUERY
    follow_up_template: str = DEFAULT_FOLLOW_UP_TEMPLATE
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    temperature: float = DEFAULT_TEMPERATURE


@dataclass(slots=True, frozen=True)
class Citation:
    """Reference to a retrieval-backend source document.

    Values are copied verbatim from the backend; empty strings are kept.
    """

    title: str
    url: str


@dataclass(slots=True, frozen=True)
class AugmentedAnswer:
    """Answer text together with the sources it was grounded in.

    Attributes:
        answer: Generated answer text.
        citations: Sources in backend order. Empty when retrieval was off,
            the backend returned none, or citations are disabled.
    """

    answer: str
    citations: tuple[Citation, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class ImageFollowUpResult:
    """Result of the two-phase image flow.

    Attributes:
        image_answer: Raw text returned by the image phase.
        follow_up: Retrieval-augmented answer to the follow-up query.
    """

    image_answer: str
    follow_up: AugmentedAnswer
