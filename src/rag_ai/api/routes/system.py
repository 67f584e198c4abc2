"""System routes.

Endpoints:
    GET /api/v1/health
        - Response: HealthResponse (status, provider mode, version)
        - Rate Limited: No (health checks should be fast)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from rag_ai.api.dependencies import get_provider_name
from rag_ai.api.models import HealthResponse
from rag_ai.infrastructure.config import get_settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    provider_name: Annotated[str, Depends(get_provider_name)],
) -> HealthResponse:
    """Health check endpoint.

    Does not call the completion backend. Returns 503 until startup has
    registered the provider.
    """
    return HealthResponse(
        status="healthy",
        provider=provider_name,
        version=get_settings().api.version,
    )
