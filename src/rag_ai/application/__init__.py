"""Application layer for the RAG AI Service.

This package contains the query orchestrator, the error taxonomy, and the
interfaces (protocols) it needs from infrastructure. It depends only on the
domain layer.

The application layer:
    - Coordinates domain logic
    - Orchestrates the text and image query workflows
    - Classifies failures into a stable taxonomy
    - Depends only on domain and interfaces (not implementations)
"""

from rag_ai.application.error_taxonomy import ErrorClassifier, ErrorOutcome, OutcomeKind
from rag_ai.application.interfaces import (
    CompletionProviderInterface,
    RequestLoggerInterface,
)
from rag_ai.application.use_cases import QueryOrchestrator

__all__ = [
    "CompletionProviderInterface",
    "ErrorClassifier",
    "ErrorOutcome",
    "OutcomeKind",
    "QueryOrchestrator",
    "RequestLoggerInterface",
]
