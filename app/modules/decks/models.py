"""Pydantic models for generated cards and generation requests.

Cards are validated after the model responds rather than through a structured
output schema: the model is asked for a bare JSON array and anything that does
not fit ``Card`` is dropped by the extractor.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CARD_COUNT = 10
MIN_CARD_COUNT = 1
MAX_CARD_COUNT = 25


def normalize_card_count(value: Any) -> int:
    """Coerce a requested card count into ``[MIN_CARD_COUNT, MAX_CARD_COUNT]``.

    Missing or non-numeric values fall back to ``DEFAULT_CARD_COUNT``; fractional
    numbers are truncated toward zero. The HTTP schema rejects those instead.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_CARD_COUNT
    try:
        count = int(value)
    except (TypeError, ValueError):
        return DEFAULT_CARD_COUNT
    return max(MIN_CARD_COUNT, min(MAX_CARD_COUNT, count))


class Card(BaseModel):
    """Simple question/answer flashcard."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", frozen=True)

    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class GenerationRequest(BaseModel):
    source_text: str
    requested_count: int = DEFAULT_CARD_COUNT

    @field_validator("requested_count", mode="before")
    @classmethod
    def _clamp_count(cls, value: Any) -> int:
        return normalize_card_count(value)
