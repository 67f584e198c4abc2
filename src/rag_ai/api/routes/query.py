"""Query routes: text chat and the image -> follow-up flow.

Endpoints:
    POST /api/v1/chat
        - Request: TextQueryRequest (systemPrompt, userQuery, useRetrieval, temperature)
        - Response: AugmentedAnswerResponse
        - Rate Limited: Yes (API_CHAT_RATE_LIMIT)

    POST /api/v1/chat-with-image
        - Request: ImageQueryRequest (systemPrompt, initialImageQuery, imageUrl,
          followUpTemplate, temperature)
        - Response: ImageQueryResponse
        - Rate Limited: Yes (API_IMAGE_RATE_LIMIT)

Request Flow:
    1. Body parsed by Pydantic (schema failures -> 400 "Validation failed")
    2. Mapped to a domain query (missing body -> None)
    3. Domain validation (failures -> 400 with the primary message, no
       provider call)
    4. Executed via QueryOrchestrator
    5. Failures classified by ErrorClassifier and rendered by outcome kind
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from rag_ai.api.dependencies import (
    get_error_classifier,
    get_orchestrator,
    get_request_context,
    parse_request_body,
)
from rag_ai.api.error_handlers import outcome_response
from rag_ai.api.mappers import (
    api_to_domain_image_query,
    api_to_domain_text_query,
    domain_to_api_answer,
    domain_to_api_image_result,
)
from rag_ai.api.middleware import limiter
from rag_ai.api.models import (
    AugmentedAnswerResponse,
    ErrorResponse,
    ImageQueryRequest,
    ImageQueryResponse,
    TextQueryRequest,
)
from rag_ai.application.error_taxonomy import ErrorClassifier
from rag_ai.application.use_cases import QueryOrchestrator
from rag_ai.domain.validation import validate_image_query, validate_text_query
from rag_ai.infrastructure.config import get_settings

router = APIRouter()

TEXT_QUERY_CONTEXT = "Query processing"
IMAGE_QUERY_CONTEXT = "Image query processing"

OrchestratorDep = Annotated[QueryOrchestrator, Depends(get_orchestrator)]
ClassifierDep = Annotated[ErrorClassifier, Depends(get_error_classifier)]

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Backend rejected credentials"},
    408: {"model": ErrorResponse, "description": "Backend timed out"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Internal error"},
}


def _chat_rate_limit() -> str:
    return get_settings().api.chat_rate_limit


def _image_rate_limit() -> str:
    return get_settings().api.image_rate_limit


def _json_response(model: AugmentedAnswerResponse | ImageQueryResponse) -> JSONResponse:
    return JSONResponse(content=model.model_dump(mode="json", by_alias=True))


@router.post(
    "/chat",
    tags=["Query"],
    response_model=None,
    responses={200: {"model": AugmentedAnswerResponse}, **_ERROR_RESPONSES},
)
@limiter.limit(_chat_rate_limit)
async def chat(
    request: Request,
    orchestrator: OrchestratorDep,
    classifier: ClassifierDep,
) -> Response:
    """Answer a text query, optionally grounded in the search index.

    Args:
        request: FastAPI Request object. Body is TextQueryRequest JSON.
        orchestrator: QueryOrchestrator (injected).
        classifier: ErrorClassifier (injected).

    Returns:
        200 with ``{answer, citations}``, or an ErrorResponse with the
        status for the failure kind.
    """
    ctx = get_request_context(request)
    api_req = await parse_request_body(request, TextQueryRequest)
    query = api_to_domain_text_query(api_req)

    validation = validate_text_query(query)
    if not validation.valid:
        return outcome_response(
            classifier.classify_validation(validation, TEXT_QUERY_CONTEXT, ctx.request_id)
        )

    try:
        answer = await orchestrator.run_text_query(query, request_id=ctx.request_id)
    except Exception as exc:
        return outcome_response(classifier.classify(exc, TEXT_QUERY_CONTEXT, ctx.request_id))

    return _json_response(domain_to_api_answer(answer))


@router.post(
    "/chat-with-image",
    tags=["Query"],
    response_model=None,
    responses={200: {"model": ImageQueryResponse}, **_ERROR_RESPONSES},
)
@limiter.limit(_image_rate_limit)
async def chat_with_image(
    request: Request,
    orchestrator: OrchestratorDep,
    classifier: ClassifierDep,
) -> Response:
    """Describe an image, then answer a retrieval-augmented follow-up.

    Args:
        request: FastAPI Request object. Body is ImageQueryRequest JSON.
        orchestrator: QueryOrchestrator (injected).
        classifier: ErrorClassifier (injected).

    Returns:
        200 with ``{imageResponse, followUpResponse}``, or an ErrorResponse
        with the status for the failure kind.
    """
    ctx = get_request_context(request)
    api_req = await parse_request_body(request, ImageQueryRequest)
    query = api_to_domain_image_query(api_req)

    validation = validate_image_query(query)
    if not validation.valid:
        return outcome_response(
            classifier.classify_validation(validation, IMAGE_QUERY_CONTEXT, ctx.request_id)
        )

    try:
        result = await orchestrator.run_image_query(query, request_id=ctx.request_id)
    except Exception as exc:
        return outcome_response(classifier.classify(exc, IMAGE_QUERY_CONTEXT, ctx.request_id))

    return _json_response(domain_to_api_image_result(result))
