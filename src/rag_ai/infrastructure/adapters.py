"""Infrastructure adapters implementing application layer interfaces.

This module provides adapter implementations that wrap concrete
infrastructure components (the Azure OpenAI SDK client, structured logging)
to satisfy the protocols defined in the application layer.

Design Principles:
    - Adapter Pattern: Wraps concrete implementations to match interfaces
    - Dependency Inversion: Application depends on interfaces, not implementations
    - Translation: Converts SDK responses and SDK errors into domain types
    - Delegation: Retries and timeouts are left to the SDK client

Key Adapters:
    - AzureOpenAICompletionProvider: Azure OpenAI chat completions with
      Azure AI Search retrieval, for CompletionProviderInterface
    - RequestLoggerAdapter: Wraps structured logging for RequestLoggerInterface
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import openai
from openai import AsyncAzureOpenAI

from rag_ai.domain.entities import AugmentedAnswer, Citation
from rag_ai.domain.exceptions import (
    InvalidArgumentError,
    ProviderTimeoutError,
    UnauthorizedError,
)
from rag_ai.telemetry.structured_logging import log_request_event

if TYPE_CHECKING:
    from rag_ai.infrastructure.config import AzureOpenAIConfig, AzureSearchConfig

logger = logging.getLogger(__name__)

IMAGE_DETAIL = "low"
BACKEND_REJECTED_MESSAGE = "The completion backend rejected the request."


def _field(obj: Any, name: str) -> Any:
    # Extension metadata arrives as plain dicts inside SDK models.
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_citations(message: Any) -> tuple[Citation, ...]:
    """Read retrieval citations from a chat completion message.

    Args:
        message: ``choices[0].message`` from a chat completion.

    Returns:
        Citations in backend order. Empty when the message carries no
        retrieval context.
    """
    citations = _field(_field(message, "context"), "citations") or []
    return tuple(
        Citation(title=_field(item, "title") or "", url=_field(item, "url") or "")
        for item in citations
    )


class AzureOpenAICompletionProvider:
    """Completion provider backed by an Azure OpenAI deployment.

    Implements CompletionProviderInterface. Text queries may be augmented
    with an Azure AI Search index through the chat completions
    ``data_sources`` extension; image queries never are.

    Attributes:
        _client: AsyncAzureOpenAI client. Owns connection pooling, the
            request timeout, and SDK-level retries.
        _deployment: Deployment name sent as ``model``.
        _data_source: Prebuilt ``data_sources`` entry for retrieval.
        _show_citations: Copy citations into answers when True.

    Note:
        The provider is immutable after construction and safe to share
        between concurrent requests.
    """

    def __init__(
        self,
        openai_config: AzureOpenAIConfig,
        search_config: AzureSearchConfig,
        client: AsyncAzureOpenAI | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            openai_config: Azure OpenAI connection settings.
            search_config: Azure AI Search settings for retrieval.
            client: Prebuilt SDK client. Built from openai_config when None.
        """
        self._client = client or AsyncAzureOpenAI(
            azure_endpoint=openai_config.endpoint,
            api_key=openai_config.api_key.get_secret_value(),
            api_version=openai_config.api_version,
            timeout=openai_config.timeout,
            max_retries=openai_config.max_retries,
        )
        self._deployment = openai_config.deployment_name
        self._show_citations = openai_config.show_citations
        self._data_source: dict[str, Any] = {
            "type": "azure_search",
            "parameters": {
                "endpoint": search_config.endpoint,
                "index_name": search_config.index_name,
                "authentication": {
                    "type": "api_key",
                    "key": search_config.api_key.get_secret_value(),
                },
            },
        }

    async def _create(self, **kwargs: Any) -> Any:
        try:
            return await self._client.chat.completions.create(
                model=self._deployment, **kwargs
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            logger.warning("azure_openai_unauthorized: status=%s", exc.status_code)
            raise UnauthorizedError(str(exc)) from exc
        except openai.APITimeoutError as exc:
            logger.warning("azure_openai_timeout: deployment=%s", self._deployment)
            raise ProviderTimeoutError(str(exc)) from exc
        except openai.BadRequestError as exc:
            logger.warning("azure_openai_bad_request: error=%s", exc)
            raise InvalidArgumentError(BACKEND_REJECTED_MESSAGE) from exc

    async def complete(
        self,
        system_prompt: str,
        user_query: str,
        use_retrieval: bool,
        temperature: float,
    ) -> AugmentedAnswer:
        """Answer a text query, optionally grounded in the search index.

        Args:
            system_prompt: System message content.
            user_query: User message content.
            use_retrieval: Attach the Azure AI Search data source.
            temperature: Sampling temperature.

        Returns:
            AugmentedAnswer with the message content and, when citations
            are enabled, the citations from the retrieval context.

        Raises:
            UnauthorizedError: On 401/403 from the backend.
            ProviderTimeoutError: When the SDK timeout expires.
            InvalidArgumentError: On 400 from the backend.
        """
        kwargs: dict[str, Any] = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_query},
            ],
            "temperature": temperature,
        }
        if use_retrieval:
            kwargs["extra_body"] = {"data_sources": [self._data_source]}

        response = await self._create(**kwargs)
        message = response.choices[0].message
        citations = extract_citations(message) if self._show_citations else ()
        logger.debug(
            "azure_openai_completed: use_retrieval=%s, citations=%d",
            use_retrieval,
            len(citations),
        )
        return AugmentedAnswer(answer=message.content or "", citations=citations)

    async def complete_with_image(
        self,
        system_prompt: str,
        initial_query: str,
        image_url: str,
        temperature: float,
    ) -> str:
        """Ask the deployment about an image.

        The image is sent by URL at low detail. Retrieval is not attached.

        Returns:
            Raw message content ("" when the backend returns none).

        Raises:
            Same as complete().
        """
        response = await self._create(
            messages=[
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": initial_query},
                        {
                            "type": "image_url",
                            "image_url": {"url": image_url, "detail": IMAGE_DETAIL},
                        },
                    ],
                },
            ],
            temperature=temperature,
        )
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying SDK client."""
        await self._client.close()


class RequestLoggerAdapter:
    """Adapter that wraps structured logging to implement RequestLoggerInterface.

    Delegates to the global log_request_event function; no instance state.
    """

    @staticmethod
    def log_request(data: dict[str, Any]) -> None:
        """Log a request event with structured data.

        Args:
            data: Event dictionary (see RequestLoggerInterface.log_request).
        """
        log_request_event(data)


__all__ = [
    "AzureOpenAICompletionProvider",
    "RequestLoggerAdapter",
    "extract_citations",
]
