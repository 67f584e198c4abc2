"""Application lifespan management.

Lifespan Responsibilities:
    - Startup:
        1. Configure process logging from settings
        2. Check configuration and build the completion provider
           (live Azure OpenAI or in-memory stand-in)
        3. Register dependencies for FastAPI Depends
    - Shutdown:
        1. Close the provider's client
        2. Clear registered dependencies

Error Handling:
    - A live-mode configuration gap raises ConfigurationError and the server
      does not start.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from rag_ai.api.dependencies import clear_dependencies, set_dependencies
from rag_ai.infrastructure.adapters import (
    AzureOpenAICompletionProvider,
    RequestLoggerAdapter,
)
from rag_ai.infrastructure.config import get_settings
from rag_ai.infrastructure.in_memory import InMemoryCompletionProvider
from rag_ai.telemetry.structured_logging import configure_logging

if TYPE_CHECKING:
    from fastapi import FastAPI

    from rag_ai.infrastructure.config import Settings

logger = logging.getLogger(__name__)


def build_provider(
    settings: Settings,
) -> AzureOpenAICompletionProvider | InMemoryCompletionProvider:
    """Build the completion provider selected by ``settings.provider.mode``.

    Raises:
        ConfigurationError: If live mode is selected and backend settings
            are incomplete.
    """
    match settings.provider.mode:
        case "in_memory":
            logger.warning("LIFESPAN: Using in-memory completion provider (simulated answers)")
            return InMemoryCompletionProvider()
        case _:
            settings.require_live_backend()
            logger.info(
                "LIFESPAN: Using Azure OpenAI deployment %s with search index %s",
                settings.azure_openai.deployment_name,
                settings.azure_search.index_name,
            )
            return AzureOpenAICompletionProvider(settings.azure_openai, settings.azure_search)


@asynccontextmanager
async def lifespan_context(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan (startup and shutdown).

    Args:
        app: FastAPI application instance.

    Yields:
        None. Control is yielded to the application for request handling.

    Raises:
        ConfigurationError: If live-mode settings are incomplete.
    """
    settings = get_settings()
    configure_logging(settings.api.log_level)
    logger.info("LIFESPAN: Starting %s %s", settings.api.title, settings.api.version)

    provider = build_provider(settings)
    set_dependencies(
        provider=provider,
        request_logger=RequestLoggerAdapter(),
        provider_name=settings.provider.mode,
    )
    logger.info("LIFESPAN: Dependencies initialized")

    try:
        yield
    finally:
        logger.info("LIFESPAN: Shutting down")
        await provider.close()
        clear_dependencies()
        logger.info("LIFESPAN: Shutdown complete")


__all__ = ["build_provider", "lifespan_context"]
