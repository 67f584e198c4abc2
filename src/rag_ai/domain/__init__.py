"""Domain layer for the RAG AI Service.

This package contains pure domain models, value objects, validation rules,
and exceptions with no dependencies on frameworks, infrastructure, or
external libraries.

The domain layer is the innermost layer and has no dependencies on outer layers.
"""

from rag_ai.domain.entities import (
    AugmentedAnswer,
    Citation,
    ImageFollowUpResult,
    ImageQuery,
    TextQuery,
)
from rag_ai.domain.exceptions import (
    ConfigurationError,
    DomainError,
    InvalidArgumentError,
    MissingArgumentError,
    ProviderTimeoutError,
    UnauthorizedError,
    UnsupportedOperationError,
)
from rag_ai.domain.validation import (
    ValidationOutcome,
    validate_image_query,
    validate_text_query,
)
from rag_ai.domain.value_objects import FollowUpTemplate, extract_description

__all__ = [
    "AugmentedAnswer",
    "Citation",
    "ConfigurationError",
    "DomainError",
    "FollowUpTemplate",
    "ImageFollowUpResult",
    "ImageQuery",
    "InvalidArgumentError",
    "MissingArgumentError",
    "ProviderTimeoutError",
    "TextQuery",
    "UnauthorizedError",
    "UnsupportedOperationError",
    "ValidationOutcome",
    "extract_description",
    "validate_image_query",
    "validate_text_query",
]
