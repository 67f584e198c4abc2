"""Deterministic in-memory completion provider.

Used for offline development (``PROVIDER_MODE=in_memory``) and for tests.
Answers come from lookup tables filled in before traffic starts, with
simulated defaults for anything unregistered. No network, no randomness.

Resolution order for complete():
    1. Exact match in the augmented-answer table
    2. Exact match in the text table (wrapped with no citations)
    3. Follow-up pending from an earlier complete_with_image() call: the
       query contains that image answer's extracted description (longest
       description wins; the entry is consumed)
    4. Simulated default answer with one placeholder citation

Resolution order for complete_with_image():
    1. Exact image URL match -> registered image answer
    2. Simulated default image answer
"""

from __future__ import annotations

import logging

from rag_ai.domain.entities import AugmentedAnswer, Citation
from rag_ai.domain.value_objects import extract_description

logger = logging.getLogger(__name__)

SIMULATED_RESPONSE_PREFIX = "This is a simulated response to: "
SIMULATED_CITATION = Citation(title="Simulated Source", url="https://example.com/simulated")
SIMULATED_IMAGE_PREFIX = "This is a simulated image analysis for: "
SIMULATED_FOLLOW_UP = AugmentedAnswer(
    answer="This is a simulated follow-up information about the image.",
    citations=(Citation(title="Simulated Image Source", url="https://example.com/images"),),
)


class InMemoryCompletionProvider:
    """In-memory implementation of CompletionProviderInterface.

    Each instance owns its tables. Register responses during setup; the
    tables are only read while requests are served. Image calls queue a
    pending follow-up that the matching text query consumes.

    Attributes:
        call_count: Number of provider calls (text and image) served.
    """

    def __init__(self) -> None:
        self._text_responses: dict[str, str] = {}
        self._augmented_responses: dict[str, AugmentedAnswer] = {}
        self._image_responses: dict[str, tuple[str, AugmentedAnswer]] = {}
        self._pending_follow_ups: list[tuple[str, AugmentedAnswer]] = []
        self.call_count = 0

    def register_text_response(self, query: str, response: str) -> None:
        """Answer ``query`` with ``response`` and no citations."""
        self._text_responses[query] = response

    def register_augmented_response(self, query: str, answer: AugmentedAnswer) -> None:
        """Answer ``query`` with a full AugmentedAnswer."""
        self._augmented_responses[query] = answer

    def register_image_response(
        self,
        image_url: str,
        image_answer: str,
        follow_up: AugmentedAnswer,
    ) -> None:
        """Register the image answer for ``image_url`` and its follow-up.

        After complete_with_image() serves ``image_url``, the next text query
        containing the description extracted from ``image_answer`` resolves
        to ``follow_up``.
        """
        self._image_responses[image_url] = (image_answer, follow_up)

    def _take_pending_follow_up(self, user_query: str) -> AugmentedAnswer | None:
        matches = [
            (index, description)
            for index, (description, _) in enumerate(self._pending_follow_ups)
            if description in user_query
        ]
        if not matches:
            return None
        index, _ = max(matches, key=lambda match: len(match[1]))
        _, follow_up = self._pending_follow_ups.pop(index)
        return follow_up

    async def complete(
        self,
        system_prompt: str,
        user_query: str,
        use_retrieval: bool,
        temperature: float,
    ) -> AugmentedAnswer:
        """Resolve a text query against the registered tables."""
        self.call_count += 1
        if (augmented := self._augmented_responses.get(user_query)) is not None:
            return augmented
        if (text := self._text_responses.get(user_query)) is not None:
            return AugmentedAnswer(answer=text)
        if (follow_up := self._take_pending_follow_up(user_query)) is not None:
            return follow_up
        logger.debug("in_memory_default_response: use_retrieval=%s", use_retrieval)
        return AugmentedAnswer(
            answer=f"{SIMULATED_RESPONSE_PREFIX}{user_query}",
            citations=(SIMULATED_CITATION,),
        )

    async def complete_with_image(
        self,
        system_prompt: str,
        initial_query: str,
        image_url: str,
        temperature: float,
    ) -> str:
        """Resolve an image query by URL and queue its follow-up."""
        self.call_count += 1
        image_answer, follow_up = self._image_responses.get(
            image_url, (f"{SIMULATED_IMAGE_PREFIX}{image_url}", SIMULATED_FOLLOW_UP)
        )
        if description := extract_description(image_answer):
            self._pending_follow_ups.append((description, follow_up))
        return image_answer

    async def close(self) -> None:
        """Nothing to release."""


__all__ = [
    "InMemoryCompletionProvider",
    "SIMULATED_CITATION",
    "SIMULATED_FOLLOW_UP",
    "SIMULATED_IMAGE_PREFIX",
    "SIMULATED_RESPONSE_PREFIX",
]
