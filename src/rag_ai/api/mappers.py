"""Mappers between API models and domain entities.

Design Principles:
    - Unidirectional: API -> Domain (requests) and Domain -> API (responses)
    - Isolated: All mapping logic centralized in this module
    - No validation: Domain queries are validated after mapping
"""

from __future__ import annotations

from rag_ai.api.models import (
    AugmentedAnswerResponse,
    CitationModel,
    ImageQueryRequest,
    ImageQueryResponse,
    TextQueryRequest,
)
from rag_ai.domain.entities import (
    AugmentedAnswer,
    ImageFollowUpResult,
    ImageQuery,
    TextQuery,
)


def api_to_domain_text_query(api_req: TextQueryRequest | None) -> TextQuery | None:
    """Convert an API text query to a domain TextQuery. None stays None."""
    if api_req is None:
        return None
    return TextQuery(
        user_query=api_req.user_query,
        system_prompt=api_req.system_prompt,
        use_retrieval=api_req.use_retrieval,
        temperature=api_req.temperature,
    )


def api_to_domain_image_query(api_req: ImageQueryRequest | None) -> ImageQuery | None:
    """Convert an API image query to a domain ImageQuery. None stays None."""
    if api_req is None:
        return None
    return ImageQuery(
        image_url=api_req.image_url,
        initial_image_query=api_req.initial_image_query,
        follow_up_template=api_req.follow_up_template,
        system_prompt=api_req.system_prompt,
        temperature=api_req.temperature,
    )


def domain_to_api_answer(answer: AugmentedAnswer) -> AugmentedAnswerResponse:
    """Convert a domain AugmentedAnswer to its response model.

    Citations keep backend order.
    """
    return AugmentedAnswerResponse(
        answer=answer.answer,
        citations=[CitationModel(title=c.title, url=c.url) for c in answer.citations],
    )


def domain_to_api_image_result(result: ImageFollowUpResult) -> ImageQueryResponse:
    """Convert a domain ImageFollowUpResult to its response model."""
    return ImageQueryResponse(
        image_response=result.image_answer,
        follow_up_response=domain_to_api_answer(result.follow_up),
    )


__all__ = [
    "api_to_domain_image_query",
    "api_to_domain_text_query",
    "domain_to_api_answer",
    "domain_to_api_image_result",
]
