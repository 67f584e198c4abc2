"""Logging setup and the JSONL request-event sink.

configure_logging() sets up process logging for the server. Every structured
event goes through log_request_event(), which appends one JSON object per line
to ``logs/requests.jsonl`` via the non-propagating ``rag_ai.requests`` logger.

Events written by the service:
    - ``http_request``: one per HTTP request (path, method, status_code,
      latency_ms, client_ip; error_type when the handler raised)
    - ``query``: orchestrator calls; ``operation`` is ``text_query``,
      ``image_query`` or ``image_follow_up``, ``status`` is ``success`` or
      ``error``
    - ``error_classified``: a failure mapped to an outcome kind
    - ``validation_failed``: a rejected request with every violation

Each event carries ``request_id`` where one exists and a UTC ``timestamp``.
"""

from __future__ import annotations

import functools
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@functools.cache
def _get_logs_dir() -> Path:
    """Get logs directory, creating it on first use.

    Returns:
        Path to the project's logs directory.
    """
    logs_dir = Path(__file__).resolve().parents[3] / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir


LOGS_DIR = _get_logs_dir()

REQUEST_LOGGER = logging.getLogger("rag_ai.requests")
if not REQUEST_LOGGER.handlers:
    REQUEST_LOGGER.setLevel(logging.INFO)
    handler = logging.FileHandler(LOGS_DIR / "requests.jsonl", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    REQUEST_LOGGER.addHandler(handler)
    REQUEST_LOGGER.propagate = False


def configure_logging(level: str = "info") -> None:
    """Configure process-wide logging.

    Args:
        level: Level name, case-insensitive ("debug", "info", ...).

    Note:
        Safe to call more than once; the latest level wins. The request
        event logger keeps its own file handler and is not affected.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)


def _json_default(value: Any) -> Any:
    match value:
        case datetime():
            return TypeAdapter(datetime).dump_python(value, mode="json")
        case _:
            return str(value)


def log_request_event(event: dict[str, Any]) -> None:
    """Emit a structured request event.

    Writes one JSON line to ``logs/requests.jsonl``. Adds a ``timestamp``
    (ISO 8601, UTC) when the event has none.

    Args:
        event: Event payload with at least ``event``. Values that are not
            JSON-native are written as ISO datetimes or ``str()``.

    Note:
        Mutates the input dict by adding the timestamp.

    Example:
        >>> log_request_event({
        ...     "event": "query",
        ...     "operation": "text_query",
        ...     "status": "success",
        ...     "latency_ms": 812.4,
        ... })
    """
    event.setdefault("timestamp", datetime.now(UTC).isoformat())
    REQUEST_LOGGER.info(json.dumps(event, default=_json_default))


__all__ = ["LOGS_DIR", "configure_logging", "log_request_event"]
