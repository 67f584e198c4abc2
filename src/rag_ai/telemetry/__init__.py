"""Telemetry utilities (structured request logging, logging setup)."""

from rag_ai.telemetry.structured_logging import configure_logging, log_request_event

__all__ = ["configure_logging", "log_request_event"]
