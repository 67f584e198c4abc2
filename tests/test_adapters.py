"""
Tests for the Azure OpenAI completion provider.

The SDK client is replaced with AsyncMock; no network calls are made.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest
from openai import AsyncAzureOpenAI
from openai.types.chat import ChatCompletion

from rag_ai.domain.entities import AugmentedAnswer, Citation
from rag_ai.domain.exceptions import (
    InvalidArgumentError,
    ProviderTimeoutError,
    UnauthorizedError,
)
from rag_ai.infrastructure.adapters import (
    AzureOpenAICompletionProvider,
    RequestLoggerAdapter,
    extract_citations,
)
from rag_ai.infrastructure.config import AzureOpenAIConfig, AzureSearchConfig

_REQUEST = httpx.Request("POST", "https://res.openai.azure.com/openai/deployments/gpt/chat")


def _completion(content, context=None):
    message = {"role": "assistant", "content": content}
    if context is not None:
        message["context"] = context
    return ChatCompletion.model_validate(
        {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 1_700_000_000,
            "model": "gpt-4o",
            "choices": [{"index": 0, "finish_reason": "stop", "message": message}],
        }
    )


@pytest.fixture
def openai_config():
    return AzureOpenAIConfig(
        endpoint="https://res.openai.azure.com/",
        api_key="openai-key",
        deployment_name="gpt-4o",
    )


@pytest.fixture
def search_config():
    return AzureSearchConfig(
        endpoint="https://search.search.windows.net",
        api_key="search-key",
        index_name="travel-docs",
    )


@pytest.fixture
def mock_client():
    client = AsyncMock()
    client.chat.completions.create = AsyncMock(return_value=_completion("Hello"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def live_provider(openai_config, search_config, mock_client):
    return AzureOpenAICompletionProvider(openai_config, search_config, client=mock_client)


class TestConstruction:
    """Tests for client construction."""

    def test_builds_sdk_client_from_config(self, openai_config, search_config):
        provider = AzureOpenAICompletionProvider(openai_config, search_config)

        assert isinstance(provider._client, AsyncAzureOpenAI)
        assert provider._client.max_retries == openai_config.max_retries
        assert provider._client.timeout == openai_config.timeout


@pytest.mark.asyncio
class TestComplete:
    """Tests for AzureOpenAICompletionProvider.complete."""

    async def test_sends_messages_and_data_source(self, live_provider, mock_client):
        await live_provider.complete("Be precise.", "Best time to visit Kyoto?", True, 0.3)

        kwargs = mock_client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be precise."},
            {"role": "user", "content": "Best time to visit Kyoto?"},
        ]
        (data_source,) = kwargs["extra_body"]["data_sources"]
        assert data_source == {
            "type": "azure_search",
            "parameters": {
                "endpoint": "https://search.search.windows.net",
                "index_name": "travel-docs",
                "authentication": {"type": "api_key", "key": "search-key"},
            },
        }

    async def test_no_data_source_without_retrieval(self, live_provider, mock_client):
        await live_provider.complete("sys", "q", False, 0.2)

        assert "extra_body" not in mock_client.chat.completions.create.await_args.kwargs

    async def test_citations_from_retrieval_context(self, live_provider, mock_client):
        mock_client.chat.completions.create.return_value = _completion(
            "Spring and autumn.",
            context={
                "citations": [
                    {"title": "Kyoto guide", "url": "https://docs/kyoto", "content": "..."},
                    {"title": "Seasons", "url": "https://docs/seasons", "content": "..."},
                ]
            },
        )

        result = await live_provider.complete("sys", "q", True, 0.2)

        assert result == AugmentedAnswer(
            answer="Spring and autumn.",
            citations=(
                Citation("Kyoto guide", "https://docs/kyoto"),
                Citation("Seasons", "https://docs/seasons"),
            ),
        )

    async def test_no_context_means_no_citations(self, live_provider):
        result = await live_provider.complete("sys", "q", True, 0.2)

        assert result == AugmentedAnswer(answer="Hello")

    async def test_citations_disabled(self, search_config, mock_client):
        config = AzureOpenAIConfig(
            endpoint="https://res.openai.azure.com",
            api_key="k",
            deployment_name="gpt-4o",
            show_citations=False,
        )
        mock_client.chat.completions.create.return_value = _completion(
            "answer", context={"citations": [{"title": "t", "url": "u"}]}
        )
        provider = AzureOpenAICompletionProvider(config, search_config, client=mock_client)

        result = await provider.complete("sys", "q", True, 0.2)

        assert result.citations == ()

    async def test_null_content_becomes_empty_answer(self, live_provider, mock_client):
        mock_client.chat.completions.create.return_value = _completion(None)

        assert (await live_provider.complete("sys", "q", False, 0.2)).answer == ""


@pytest.mark.asyncio
class TestCompleteWithImage:
    """Tests for AzureOpenAICompletionProvider.complete_with_image."""

    async def test_sends_low_detail_image_without_retrieval(self, live_provider, mock_client):
        mock_client.chat.completions.create.return_value = _completion("A harbour at dusk")

        result = await live_provider.complete_with_image(
            "sys", "What is shown?", "https://example.com/h.jpg", 0.2
        )

        assert result == "A harbour at dusk"
        kwargs = mock_client.chat.completions.create.await_args.kwargs
        assert "extra_body" not in kwargs
        user_message = kwargs["messages"][1]
        assert user_message["content"] == [
            {"type": "text", "text": "What is shown?"},
            {
                "type": "image_url",
                "image_url": {"url": "https://example.com/h.jpg", "detail": "low"},
            },
        ]


@pytest.mark.asyncio
class TestErrorTranslation:
    """SDK errors become domain exceptions."""

    @pytest.mark.parametrize(
        ("sdk_error", "expected"),
        [
            (
                openai.AuthenticationError(
                    "bad key", response=httpx.Response(401, request=_REQUEST), body=None
                ),
                UnauthorizedError,
            ),
            (
                openai.PermissionDeniedError(
                    "forbidden", response=httpx.Response(403, request=_REQUEST), body=None
                ),
                UnauthorizedError,
            ),
            (openai.APITimeoutError(request=_REQUEST), ProviderTimeoutError),
            (
                openai.BadRequestError(
                    "bad request", response=httpx.Response(400, request=_REQUEST), body=None
                ),
                InvalidArgumentError,
            ),
        ],
    )
    async def test_translation(self, live_provider, mock_client, sdk_error, expected):
        mock_client.chat.completions.create.side_effect = sdk_error

        with pytest.raises(expected) as exc_info:
            await live_provider.complete("sys", "q", True, 0.2)

        assert exc_info.value.__cause__ is sdk_error

    async def test_other_errors_propagate(self, live_provider, mock_client):
        sdk_error = openai.InternalServerError(
            "oops", response=httpx.Response(500, request=_REQUEST), body=None
        )
        mock_client.chat.completions.create.side_effect = sdk_error

        with pytest.raises(openai.InternalServerError):
            await live_provider.complete_with_image("sys", "q", "https://x/y.png", 0.2)

    async def test_close_closes_client(self, live_provider, mock_client):
        await live_provider.close()
        mock_client.close.assert_awaited_once()


class TestExtractCitations:
    """Tests for extract_citations."""

    def test_attribute_style_context(self):
        message = SimpleNamespace(
            context=SimpleNamespace(citations=[SimpleNamespace(title="T", url="U")])
        )
        assert extract_citations(message) == (Citation("T", "U"),)

    def test_missing_fields_become_empty_strings(self):
        message = SimpleNamespace(context={"citations": [{"title": None}]})
        assert extract_citations(message) == (Citation("", ""),)

    def test_no_context(self):
        assert extract_citations(SimpleNamespace(content="x")) == ()


class TestRequestLoggerAdapter:
    """Tests for RequestLoggerAdapter."""

    def test_delegates_to_structured_logging(self, monkeypatch):
        captured = []
        monkeypatch.setattr(
            "rag_ai.infrastructure.adapters.log_request_event", captured.append
        )

        RequestLoggerAdapter().log_request({"event": "query", "status": "success"})

        assert captured == [{"event": "query", "status": "success"}]
