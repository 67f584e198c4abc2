"""Use cases for the RAG AI Service.

This module defines the query orchestrator: the application service that
turns validated queries into provider calls and shapes the results into the
service's answer types. It depends only on the domain layer and on the
interfaces in rag_ai.application.interfaces.

Design Principles:
    - Dependency Inversion: Depends on CompletionProviderInterface, never on
      a concrete provider
    - Transparent failures: Provider exceptions propagate unmodified; they
      are classified once, at the HTTP boundary
    - No retries: Retry and backoff belong to the provider's own client
    - Framework-agnostic: No FastAPI, Pydantic, or SDK dependencies

Use Case Responsibilities:
    - Clamp temperature before it reaches the provider
    - Run single-shot text queries
    - Run the two-phase image flow (image answer -> description -> follow-up)
    - Log request events with latency
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from rag_ai.domain.entities import (
    AugmentedAnswer,
    ImageFollowUpResult,
    ImageQuery,
    TextQuery,
)
from rag_ai.domain.exceptions import MissingArgumentError
from rag_ai.domain.value_objects import (
    FollowUpTemplate,
    clamp_temperature,
    extract_description,
)

if TYPE_CHECKING:
    from rag_ai.application.interfaces import (
        CompletionProviderInterface,
        RequestLoggerInterface,
    )

logger = logging.getLogger(__name__)

FOLLOW_UP_USES_RETRIEVAL = True
"""Retrieval is always attached to the image flow's follow-up query."""


class QueryOrchestrator:
    """Use case for text and image queries.

    Orchestrates the service's two operations over an injected completion
    provider. One instance is built per request; the provider it wraps is
    long-lived and shared.

    Attributes:
        _provider: Completion provider implementing CompletionProviderInterface.
        _request_logger: Structured request logger. None disables request
            events (operational log lines are still written).

    Note:
        Queries are expected to have passed rag_ai.domain.validation already.
        The orchestrator does not re-validate them.
    """

    def __init__(
        self,
        provider: CompletionProviderInterface,
        request_logger: RequestLoggerInterface | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            provider: Completion provider used for every call.
            request_logger: Optional structured request logger.

        Raises:
            MissingArgumentError: If provider is None.
        """
        if provider is None:
            raise MissingArgumentError("provider is required")
        self._provider = provider
        self._request_logger = request_logger

    def _log_event(self, operation: str, status: str, **fields: Any) -> None:
        if self._request_logger is None:
            return
        event: dict[str, Any] = {"event": "query", "operation": operation, "status": status}
        event.update({k: v for k, v in fields.items() if v is not None})
        self._request_logger.log_request(event)

    async def run_text_query(
        self,
        query: TextQuery,
        request_id: str | None = None,
    ) -> AugmentedAnswer:
        """Answer a text query.

        Args:
            query: Validated text query.
            request_id: Request identifier for log correlation.

        Returns:
            The provider's AugmentedAnswer, unchanged.

        Raises:
            MissingArgumentError: If query is None.
            Exception: Any provider failure, unmodified.
        """
        if query is None:
            raise MissingArgumentError("query is required")
        return await self._answer(query, request_id, "text_query")

    async def _answer(
        self,
        query: TextQuery,
        request_id: str | None,
        operation: str,
    ) -> AugmentedAnswer:
        start_time = time.perf_counter()
        logger.info(
            "%s_started: request_id=%s, use_retrieval=%s, query_chars=%d",
            operation,
            request_id,
            query.use_retrieval,
            len(query.user_query),
        )
        try:
            answer = await self._provider.complete(
                system_prompt=query.system_prompt,
                user_query=query.user_query,
                use_retrieval=query.use_retrieval,
                temperature=clamp_temperature(query.temperature),
            )
        except Exception as exc:
            latency_ms = round((time.perf_counter() - start_time) * 1000, 3)
            logger.error(
                "%s_failed: request_id=%s, error_type=%s, error=%s",
                operation,
                request_id,
                type(exc).__name__,
                exc,
            )
            self._log_event(
                operation,
                "error",
                request_id=request_id,
                latency_ms=latency_ms,
                error_type=type(exc).__name__,
            )
            raise

        latency_ms = round((time.perf_counter() - start_time) * 1000, 3)
        logger.info(
            "%s_completed: request_id=%s, citations=%d, latency_ms=%.3f",
            operation,
            request_id,
            len(answer.citations),
            latency_ms,
        )
        self._log_event(
            operation,
            "success",
            request_id=request_id,
            latency_ms=latency_ms,
            use_retrieval=query.use_retrieval,
            citations_count=len(answer.citations),
        )
        return answer

    async def run_image_query(
        self,
        query: ImageQuery,
        request_id: str | None = None,
    ) -> ImageFollowUpResult:
        """Describe an image, then answer a retrieval-augmented follow-up.

        Flow:
            1. Ask the provider about the image -> raw image answer
            2. Extract the description (``place_description`` from a JSON
               answer, otherwise the raw answer)
            3. Render the follow-up query from the template
            4. Run it as a text query with retrieval forced on; its events
               carry operation ``image_follow_up``

        Args:
            query: Validated image query.
            request_id: Request identifier for log correlation.

        Returns:
            ImageFollowUpResult with the raw image answer and the follow-up.

        Raises:
            MissingArgumentError: If query is None.
            InvalidArgumentError: If the follow-up template has no slot.
                Raised before any provider call.
            Exception: Any provider failure from either phase, unmodified.
        """
        if query is None:
            raise MissingArgumentError("query is required")

        template = FollowUpTemplate(query.follow_up_template)
        temperature = clamp_temperature(query.temperature)

        start_time = time.perf_counter()
        logger.info(
            "image_query_started: request_id=%s, image_url=%s",
            request_id,
            query.image_url,
        )
        try:
            image_answer = await self._provider.complete_with_image(
                system_prompt=query.system_prompt,
                initial_query=query.initial_image_query,
                image_url=query.image_url,
                temperature=temperature,
            )
            description = extract_description(image_answer)
            logger.debug(
                "image_description_extracted: request_id=%s, from_json=%s",
                request_id,
                description is not image_answer,
            )

            follow_up = await self._answer(
                TextQuery(
                    user_query=template.render(description),
                    system_prompt=query.system_prompt,
                    use_retrieval=FOLLOW_UP_USES_RETRIEVAL,
                    temperature=temperature,
                ),
                request_id,
                "image_follow_up",
            )
        except Exception as exc:
            latency_ms = round((time.perf_counter() - start_time) * 1000, 3)
            logger.error(
                "image_query_failed: request_id=%s, image_url=%s, error_type=%s",
                request_id,
                query.image_url,
                type(exc).__name__,
            )
            self._log_event(
                "image_query",
                "error",
                request_id=request_id,
                latency_ms=latency_ms,
                error_type=type(exc).__name__,
            )
            raise

        latency_ms = round((time.perf_counter() - start_time) * 1000, 3)
        logger.info(
            "image_query_completed: request_id=%s, latency_ms=%.3f",
            request_id,
            latency_ms,
        )
        self._log_event(
            "image_query",
            "success",
            request_id=request_id,
            latency_ms=latency_ms,
            citations_count=len(follow_up.citations),
        )
        return ImageFollowUpResult(image_answer=image_answer, follow_up=follow_up)


__all__ = ["FOLLOW_UP_USES_RETRIEVAL", "QueryOrchestrator"]
