"""RAG AI Service - retrieval-augmented text and image question answering."""

from rag_ai.application import ErrorClassifier, ErrorOutcome, OutcomeKind, QueryOrchestrator
from rag_ai.domain import (
    AugmentedAnswer,
    Citation,
    ImageFollowUpResult,
    ImageQuery,
    TextQuery,
    ValidationOutcome,
    validate_image_query,
    validate_text_query,
)
from rag_ai.infrastructure import (
    AzureOpenAICompletionProvider,
    InMemoryCompletionProvider,
)

__version__ = "1.0.0"

__all__ = [
    "AugmentedAnswer",
    "AzureOpenAICompletionProvider",
    "Citation",
    "ErrorClassifier",
    "ErrorOutcome",
    "ImageFollowUpResult",
    "ImageQuery",
    "InMemoryCompletionProvider",
    "OutcomeKind",
    "QueryOrchestrator",
    "TextQuery",
    "ValidationOutcome",
    "__version__",
    "validate_image_query",
    "validate_text_query",
]
