"""Infrastructure layer for the RAG AI Service.

Contains:
- Configuration (Settings, get_settings)
- Completion providers (live Azure OpenAI, in-memory stand-in)
- Request logger adapter
"""

from rag_ai.infrastructure.adapters import (
    AzureOpenAICompletionProvider,
    RequestLoggerAdapter,
)
from rag_ai.infrastructure.config import Settings, get_settings
from rag_ai.infrastructure.in_memory import InMemoryCompletionProvider

__all__ = [
    "AzureOpenAICompletionProvider",
    "InMemoryCompletionProvider",
    "RequestLoggerAdapter",
    "Settings",
    "get_settings",
]
