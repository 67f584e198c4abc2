"""Run the API server: ``python -m rag_ai``."""

from __future__ import annotations

import uvicorn

from rag_ai.infrastructure.config import get_settings


def main() -> None:
    """Start uvicorn with host, port and log level from settings."""
    settings = get_settings()
    uvicorn.run(
        "rag_ai.api.server:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
        log_level=settings.api.log_level,
    )


if __name__ == "__main__":
    main()
