"""Reusable test utilities and helpers for RAG AI Service tests."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from httpx import Response

from rag_ai.api.dependencies import get_provider, get_request_logger


class RecordingRequestLogger:
    """RequestLoggerInterface implementation that stores events."""

    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    def log_request(self, data: dict[str, Any]) -> None:
        self.events.append(dict(data))

    def of_type(self, event: str) -> list[dict[str, Any]]:
        return [e for e in self.events if e.get("event") == event]


class FailingRequestLogger:
    """RequestLoggerInterface implementation whose writes always fail."""

    def log_request(self, data: dict[str, Any]) -> None:
        raise OSError("disk full")


def setup_dependency_overrides(app: FastAPI, provider: Any, request_logger: Any) -> None:
    """Route the app's provider and request logger to test doubles.

    Args:
        app: FastAPI application instance.
        provider: Completion provider used by every request.
        request_logger: Request logger used by the orchestrator and classifier.
    """
    app.dependency_overrides[get_provider] = lambda: provider
    app.dependency_overrides[get_request_logger] = lambda: request_logger


def cleanup_dependency_overrides(app: FastAPI) -> None:
    """Clean up FastAPI dependency overrides after testing."""
    app.dependency_overrides.clear()


def assert_response_structure(response: Response, expected_status: int = 200) -> dict[str, Any]:
    """Assert response has expected status and return JSON data."""
    assert response.status_code == expected_status, (
        f"Expected status {expected_status}, got {response.status_code}. "
        f"Response: {response.text}"
    )
    assert response.headers.get("content-type", "").startswith("application/json")
    return response.json()


def assert_error_response(response: Response, expected_status: int) -> dict[str, Any]:
    """Assert an ErrorResponse body with the expected status."""
    data = assert_response_structure(response, expected_status)
    assert "error" in data, f"Error response missing 'error' key: {data}"
    return data
