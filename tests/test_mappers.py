"""
Tests for API <-> domain mappers and the camelCase wire format.
"""

from rag_ai.api.mappers import (
    api_to_domain_image_query,
    api_to_domain_text_query,
    domain_to_api_answer,
    domain_to_api_image_result,
)
from rag_ai.api.models import ImageQueryRequest, TextQueryRequest
from rag_ai.domain.entities import (
    DEFAULT_FOLLOW_UP_TEMPLATE,
    DEFAULT_SYSTEM_PROMPT,
    AugmentedAnswer,
    Citation,
    ImageFollowUpResult,
)


class TestRequestMapping:
    """API request -> domain query."""

    def test_text_query_from_camel_case(self):
        api_req = TextQueryRequest.model_validate(
            {"userQuery": "What is RAG?", "useRetrieval": False, "temperature": 0.7}
        )
        query = api_to_domain_text_query(api_req)
        assert query is not None
        assert query.user_query == "What is RAG?"
        assert query.use_retrieval is False
        assert query.temperature == 0.7
        assert query.system_prompt == DEFAULT_SYSTEM_PROMPT

    def test_text_query_accepts_field_names(self):
        api_req = TextQueryRequest.model_validate({"user_query": "hi"})
        query = api_to_domain_text_query(api_req)
        assert query is not None
        assert query.user_query == "hi"
        assert query.use_retrieval is True

    def test_none_stays_none(self):
        assert api_to_domain_text_query(None) is None
        assert api_to_domain_image_query(None) is None

    def test_image_query_defaults(self):
        api_req = ImageQueryRequest.model_validate({"imageUrl": "https://example.com/a.png"})
        query = api_to_domain_image_query(api_req)
        assert query is not None
        assert query.image_url == "https://example.com/a.png"
        assert query.follow_up_template == DEFAULT_FOLLOW_UP_TEMPLATE

    def test_unknown_fields_ignored(self):
        api_req = TextQueryRequest.model_validate({"userQuery": "hi", "extra": 1})
        assert api_to_domain_text_query(api_req) is not None


class TestResponseMapping:
    """Domain result -> API response."""

    def test_answer_keeps_citation_order(self):
        answer = AugmentedAnswer(
            answer="A",
            citations=(Citation("first", "https://a"), Citation("second", "https://b")),
        )
        response = domain_to_api_answer(answer)
        assert response.answer == "A"
        assert [c.title for c in response.citations] == ["first", "second"]

    def test_answer_without_citations(self):
        response = domain_to_api_answer(AugmentedAnswer(answer="A"))
        assert response.citations == []

    def test_image_result_serializes_camel_case(self):
        result = ImageFollowUpResult(
            image_answer="A cat",
            follow_up=AugmentedAnswer(answer="Cats are mammals"),
        )
        body = domain_to_api_image_result(result).model_dump(mode="json", by_alias=True)
        assert body["imageResponse"] == "A cat"
        assert body["followUpResponse"]["answer"] == "Cats are mammals"
        assert body["followUpResponse"]["citations"] == []
