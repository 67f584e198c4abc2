"""
Behavioral tests for the query orchestrator.

Uses the in-memory provider for real workflows and AsyncMock where a test
needs to inspect the exact provider call or inject a failure.
"""

import json
from unittest.mock import AsyncMock

import pytest

from rag_ai.application.use_cases import QueryOrchestrator
from rag_ai.domain.entities import (
    AugmentedAnswer,
    Citation,
    ImageFollowUpResult,
    ImageQuery,
    TextQuery,
)
from rag_ai.domain.exceptions import (
    InvalidArgumentError,
    MissingArgumentError,
    ProviderTimeoutError,
)
from rag_ai.infrastructure.in_memory import InMemoryCompletionProvider


@pytest.fixture
def mock_provider():
    """Provider double whose calls can be inspected."""
    provider = AsyncMock()
    provider.complete = AsyncMock(return_value=AugmentedAnswer(answer="ok"))
    provider.complete_with_image = AsyncMock(return_value="A lighthouse on a cliff")
    return provider


class TestQueryOrchestratorConstruction:
    """Tests for QueryOrchestrator.__init__."""

    def test_requires_provider(self):
        with pytest.raises(MissingArgumentError):
            QueryOrchestrator(provider=None)  # type: ignore[arg-type]


@pytest.mark.asyncio
class TestRunTextQuery:
    """Tests for QueryOrchestrator.run_text_query."""

    async def test_returns_registered_answer_unchanged(self, provider):
        expected = AugmentedAnswer(
            answer="RAG grounds answers in documents.",
            citations=(Citation("Doc A", "https://docs/a"), Citation("Doc B", "https://docs/b")),
        )
        provider.register_augmented_response("rag query", expected)

        result = await QueryOrchestrator(provider).run_text_query(
            TextQuery(user_query="rag query", temperature=0.5)
        )

        assert result == expected

    async def test_default_answer_for_unregistered_query(self, provider):
        result = await QueryOrchestrator(provider).run_text_query(TextQuery(user_query="hello"))

        assert result.answer == "This is a simulated response to: hello"
        assert len(result.citations) == 1

    async def test_passes_query_fields_to_provider(self, mock_provider):
        query = TextQuery(
            user_query="What is new?",
            system_prompt="Be brief.",
            use_retrieval=False,
            temperature=0.9,
        )

        await QueryOrchestrator(mock_provider).run_text_query(query)

        mock_provider.complete.assert_awaited_once_with(
            system_prompt="Be brief.",
            user_query="What is new?",
            use_retrieval=False,
            temperature=0.9,
        )

    async def test_clamps_temperature_before_provider(self, mock_provider):
        await QueryOrchestrator(mock_provider).run_text_query(
            TextQuery(user_query="hi", temperature=7.0)
        )
        assert mock_provider.complete.await_args.kwargs["temperature"] == 2.0

    async def test_none_query_is_missing_argument(self, provider):
        with pytest.raises(MissingArgumentError):
            await QueryOrchestrator(provider).run_text_query(None)  # type: ignore[arg-type]
        assert provider.call_count == 0

    async def test_provider_failure_propagates_unmodified(self, mock_provider, request_logger):
        failure = ProviderTimeoutError("timed out")
        mock_provider.complete.side_effect = failure

        with pytest.raises(ProviderTimeoutError) as exc_info:
            await QueryOrchestrator(mock_provider, request_logger).run_text_query(
                TextQuery(user_query="hi"), request_id="req-9"
            )

        assert exc_info.value is failure
        (event,) = request_logger.of_type("query")
        assert event["status"] == "error"
        assert event["error_type"] == "ProviderTimeoutError"
        assert event["request_id"] == "req-9"

    async def test_success_event(self, provider, request_logger):
        await QueryOrchestrator(provider, request_logger).run_text_query(
            TextQuery(user_query="hi"), request_id="req-1"
        )

        (event,) = request_logger.of_type("query")
        assert event["operation"] == "text_query"
        assert event["status"] == "success"
        assert event["citations_count"] == 1
        assert event["latency_ms"] >= 0


@pytest.mark.asyncio
class TestRunImageQuery:
    """Tests for QueryOrchestrator.run_image_query."""

    async def test_registered_image_flow(self, provider):
        follow_up = AugmentedAnswer(answer="Follow-up result")
        provider.register_image_response(
            "https://example.com/img.png", "Image analysis result", follow_up
        )

        result = await QueryOrchestrator(provider).run_image_query(
            ImageQuery(image_url="https://example.com/img.png")
        )

        assert result == ImageFollowUpResult(
            image_answer="Image analysis result", follow_up=follow_up
        )
        assert provider.call_count == 2

    async def test_follow_up_belongs_to_requested_image(self, provider):
        provider.register_image_response(
            "https://img/1.png", "cat", AugmentedAnswer(answer="first")
        )
        provider.register_image_response(
            "https://img/2.png", "cat on sofa", AugmentedAnswer(answer="second")
        )

        result = await QueryOrchestrator(provider).run_image_query(
            ImageQuery(image_url="https://img/2.png")
        )

        assert result.image_answer == "cat on sofa"
        assert result.follow_up.answer == "second"

    async def test_default_image_flow(self, provider):
        url = "https://example.com/unknown.jpg"

        result = await QueryOrchestrator(provider).run_image_query(ImageQuery(image_url=url))

        assert result.image_answer == f"This is a simulated image analysis for: {url}"
        assert result.follow_up.answer == (
            "This is a simulated follow-up information about the image."
        )
        assert result.follow_up.citations == (
            Citation("Simulated Image Source", "https://example.com/images"),
        )

    async def test_follow_up_uses_json_description(self, mock_provider):
        mock_provider.complete_with_image.return_value = json.dumps(
            {"place_description": "Lisbon tram 28", "confidence": "high"}
        )

        await QueryOrchestrator(mock_provider).run_image_query(
            ImageQuery(
                image_url="https://example.com/tram.jpg",
                follow_up_template="History of {0}",
                system_prompt="You are a tour guide.",
                temperature=0.4,
            )
        )

        mock_provider.complete.assert_awaited_once_with(
            system_prompt="You are a tour guide.",
            user_query="History of Lisbon tram 28",
            use_retrieval=True,
            temperature=0.4,
        )

    async def test_follow_up_uses_raw_answer_when_not_json(self, mock_provider):
        await QueryOrchestrator(mock_provider).run_image_query(
            ImageQuery(image_url="https://example.com/x.png")
        )
        kwargs = mock_provider.complete.await_args.kwargs
        assert kwargs["user_query"] == "Tell me more about: A lighthouse on a cliff"
        assert kwargs["use_retrieval"] is True

    async def test_image_call_arguments(self, mock_provider):
        await QueryOrchestrator(mock_provider).run_image_query(
            ImageQuery(
                image_url="https://example.com/x.png",
                initial_image_query="Where is this?",
                temperature=-2.0,
            )
        )
        mock_provider.complete_with_image.assert_awaited_once_with(
            system_prompt="You are a helpful assistant.",
            initial_query="Where is this?",
            image_url="https://example.com/x.png",
            temperature=0.0,
        )

    async def test_template_without_slot_fails_before_provider(self, provider):
        with pytest.raises(InvalidArgumentError):
            await QueryOrchestrator(provider).run_image_query(
                ImageQuery(image_url="https://example.com/x.png", follow_up_template="No slot")
            )
        assert provider.call_count == 0

    async def test_image_phase_failure_skips_follow_up(self, mock_provider, request_logger):
        mock_provider.complete_with_image.side_effect = RuntimeError("backend down")

        with pytest.raises(RuntimeError, match="backend down"):
            await QueryOrchestrator(mock_provider, request_logger).run_image_query(
                ImageQuery(image_url="https://example.com/x.png")
            )

        mock_provider.complete.assert_not_awaited()
        (event,) = request_logger.of_type("query")
        assert event["operation"] == "image_query"
        assert event["status"] == "error"

    async def test_follow_up_failure_propagates(self, mock_provider):
        mock_provider.complete.side_effect = ProviderTimeoutError("slow")

        with pytest.raises(ProviderTimeoutError):
            await QueryOrchestrator(mock_provider).run_image_query(
                ImageQuery(image_url="https://example.com/x.png")
            )

    async def test_follow_up_failure_events_name_each_phase(self, mock_provider, request_logger):
        mock_provider.complete.side_effect = ProviderTimeoutError("slow")

        with pytest.raises(ProviderTimeoutError):
            await QueryOrchestrator(mock_provider, request_logger).run_image_query(
                ImageQuery(image_url="https://example.com/x.png")
            )

        events = request_logger.of_type("query")
        assert [(e["operation"], e["status"]) for e in events] == [
            ("image_follow_up", "error"),
            ("image_query", "error"),
        ]

    async def test_follow_up_success_event_is_not_a_text_query(self, provider, request_logger):
        await QueryOrchestrator(provider, request_logger).run_image_query(
            ImageQuery(image_url="https://example.com/x.png")
        )

        operations = [e["operation"] for e in request_logger.of_type("query")]
        assert operations == ["image_follow_up", "image_query"]

    async def test_orchestrators_share_provider_safely(self):
        shared = InMemoryCompletionProvider()
        shared.register_text_response("a", "answer a")
        shared.register_text_response("b", "answer b")

        first = await QueryOrchestrator(shared).run_text_query(TextQuery(user_query="a"))
        second = await QueryOrchestrator(shared).run_text_query(TextQuery(user_query="b"))

        assert (first.answer, second.answer) == ("answer a", "answer b")
        assert shared.call_count == 2
