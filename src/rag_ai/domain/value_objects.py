"""Value objects and pure helpers for the RAG AI Service.

This module holds the small, self-validating pieces the orchestration layer
composes: the follow-up template, the temperature clamp, and the fallible
parse used to pull a description out of an image answer.

Design Principles:
    - Immutability: Value objects are frozen dataclasses (slots=True)
    - Explicit failure: Parsing returns a result variant instead of raising
    - No I/O: Everything here is deterministic and side-effect free

Key Value Objects:
    - FollowUpTemplate: Template with exactly one description slot
    - MappingParsed / MappingRejected: Outcome of parse_flat_mapping
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from rag_ai.domain.entities import TEMPERATURE_MAX, TEMPERATURE_MIN
from rag_ai.domain.exceptions import InvalidArgumentError, MissingArgumentError

DESCRIPTION_KEY = "place_description"
"""Key read from a JSON image answer to build the follow-up query."""

TEMPLATE_SLOT = "{0}"
"""Placeholder replaced by the image description."""

_BARE_TEMPLATE_SLOT = "{}"


@dataclass(slots=True, frozen=True)
class MappingParsed:
    """Successful parse of a flat string-to-string JSON object."""

    fields: dict[str, str]


@dataclass(slots=True, frozen=True)
class MappingRejected:
    """Text that is not a flat string-to-string JSON object.

    Attributes:
        reason: Short explanation, kept for debug logging only.
    """

    reason: str


MappingParseResult = MappingParsed | MappingRejected


@dataclass(slots=True, frozen=True)
class FollowUpTemplate:
    """Value object for the follow-up query template.

    The template must contain ``{0}``. A bare ``{}`` is accepted as the same
    slot. Every occurrence of the slot is replaced; other braces are left
    untouched, so JSON-looking templates are safe.

    Raises:
        MissingArgumentError: If the template is None.
        InvalidArgumentError: If the template is blank or has no slot.
    """

    value: str

    def __post_init__(self) -> None:
        if self.value is None:
            raise MissingArgumentError("Follow-up template is required")
        if not self.value.strip():
            raise InvalidArgumentError("FollowUpTemplate is required and cannot be empty")
        if TEMPLATE_SLOT not in self.value and _BARE_TEMPLATE_SLOT not in self.value:
            raise InvalidArgumentError(
                "FollowUpTemplate must contain a {0} placeholder for the image description"
            )

    def render(self, description: str) -> str:
        """Substitute the description into the template slot."""
        slot = TEMPLATE_SLOT if TEMPLATE_SLOT in self.value else _BARE_TEMPLATE_SLOT
        return self.value.replace(slot, description)


def clamp_temperature(value: float) -> float:
    """Clamp a temperature into [TEMPERATURE_MIN, TEMPERATURE_MAX]."""
    return max(TEMPERATURE_MIN, min(TEMPERATURE_MAX, float(value)))


def parse_flat_mapping(text: str) -> MappingParseResult:
    """Parse text as a JSON object whose keys and values are all strings.

    Args:
        text: Raw model output.

    Returns:
        MappingParsed with the decoded fields, or MappingRejected when the
        text is not JSON (including input nested too deeply to decode), not
        an object, or holds a non-string value.
    """
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        return MappingRejected(reason=f"not JSON: {exc.msg}")
    except RecursionError:
        return MappingRejected(reason="nested too deeply")

    if not isinstance(decoded, dict):
        return MappingRejected(reason=f"expected object, got {type(decoded).__name__}")

    for key, value in decoded.items():
        if not isinstance(value, str):
            return MappingRejected(reason=f"value for {key!r} is {type(value).__name__}")

    return MappingParsed(fields=decoded)


def extract_description(image_answer: str) -> str:
    """Return the description used to build the follow-up query.

    Uses the ``place_description`` field when the image answer is a flat JSON
    object containing it; otherwise the raw answer is used verbatim.
    """
    match parse_flat_mapping(image_answer):
        case MappingParsed(fields=fields) if DESCRIPTION_KEY in fields:
            return fields[DESCRIPTION_KEY]
        case _:
            return image_answer


__all__ = [
    "DESCRIPTION_KEY",
    "TEMPLATE_SLOT",
    "FollowUpTemplate",
    "MappingParseResult",
    "MappingParsed",
    "MappingRejected",
    "clamp_temperature",
    "extract_description",
    "parse_flat_mapping",
]
