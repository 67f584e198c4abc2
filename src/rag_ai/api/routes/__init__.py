"""API routes for the RAG AI Service."""

from rag_ai.api.routes.query import router as query_router
from rag_ai.api.routes.system import router as system_router

__all__ = ["query_router", "system_router"]
