"""
Pytest configuration and fixtures for RAG AI Service tests.
"""

import os
import sys
from pathlib import Path

# Tests never talk to Azure; the app must start with the in-memory provider.
os.environ["PROVIDER_MODE"] = "in_memory"

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

import pytest

from rag_ai.infrastructure.in_memory import InMemoryCompletionProvider
from tests.helpers import RecordingRequestLogger


@pytest.fixture
def provider():
    """Fresh in-memory provider with empty tables."""
    return InMemoryCompletionProvider()


@pytest.fixture
def request_logger():
    """Request logger that keeps events in memory."""
    return RecordingRequestLogger()
