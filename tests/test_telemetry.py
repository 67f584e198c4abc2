"""
Tests for structured request logging.
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from rag_ai.telemetry import structured_logging
from rag_ai.telemetry.structured_logging import configure_logging, log_request_event


@pytest.fixture
def captured_lines(monkeypatch):
    """Capture what the request logger would write."""
    lines = []
    monkeypatch.setattr(structured_logging.REQUEST_LOGGER, "info", lines.append)
    return lines


class TestLogRequestEvent:
    """Tests for log_request_event."""

    def test_writes_one_json_line(self, captured_lines):
        log_request_event({"event": "query", "status": "success", "latency_ms": 12.5})

        (line,) = captured_lines
        payload = json.loads(line)
        assert payload["event"] == "query"
        assert payload["latency_ms"] == 12.5

    def test_injects_timestamp(self, captured_lines):
        event = {"event": "query"}
        log_request_event(event)
        assert "timestamp" in event
        assert json.loads(captured_lines[0])["timestamp"] == event["timestamp"]

    def test_keeps_existing_timestamp(self, captured_lines):
        log_request_event({"event": "query", "timestamp": "2026-01-01T00:00:00+00:00"})
        assert json.loads(captured_lines[0])["timestamp"] == "2026-01-01T00:00:00+00:00"

    def test_serializes_datetime_and_path(self, captured_lines):
        log_request_event(
            {
                "event": "query",
                "at": datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
                "file": Path("/tmp/x.png"),
            }
        )
        payload = json.loads(captured_lines[0])
        assert payload["at"].startswith("2026-03-01T12:00:00")
        assert payload["file"] == "/tmp/x.png"

    def test_request_logger_does_not_propagate(self):
        assert structured_logging.REQUEST_LOGGER.propagate is False


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
            configure_logging("WARNING")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)

    def test_unknown_level_falls_back_to_info(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("chatty")
            assert root.level == logging.INFO
        finally:
            root.setLevel(previous)
