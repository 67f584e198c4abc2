"""FastAPI REST API server for the RAG AI Service.

Key behaviors:
    - Builds the completion provider once at startup (lifespan)
    - Rate limiting via slowapi
    - Consistent ErrorResponse bodies on every failure path
    - Structured request logging

Endpoints:
    - GET /                         - Service information
    - GET /api/v1/health            - Health check
    - POST /api/v1/chat             - Text query (optional retrieval)
    - POST /api/v1/chat-with-image  - Image query with retrieval-augmented follow-up
"""

from __future__ import annotations

from fastapi import FastAPI

from rag_ai.api.lifespan import lifespan_context
from rag_ai.api.middleware import setup_exception_handlers, setup_middleware
from rag_ai.api.routes import query_router, system_router
from rag_ai.infrastructure.config import get_settings

API_PREFIX = "/api/v1"

settings = get_settings()

app = FastAPI(
    title=settings.api.title,
    description="Retrieval-augmented question answering over text and images",
    version=settings.api.version,
    docs_url=settings.api.docs_url,
    openapi_url=settings.api.openapi_url,
    lifespan=lifespan_context,
)

setup_middleware(app, settings)
setup_exception_handlers(app)

app.include_router(system_router, prefix=API_PREFIX)
app.include_router(query_router, prefix=API_PREFIX)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information.

    Returns:
        Dictionary with service name, version, docs path and health path.
    """
    return {
        "service": settings.api.title,
        "version": settings.api.version,
        "docs": settings.api.docs_url,
        "health": f"{API_PREFIX}/health",
    }
