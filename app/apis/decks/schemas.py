from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.modules.decks.models import (
    DEFAULT_CARD_COUNT,
    MAX_CARD_COUNT,
    MIN_CARD_COUNT,
)


class GenerateDeckRequest(BaseModel):
    text: str = Field(default="", description="Source material for the cards")
    count: int = Field(
        default=DEFAULT_CARD_COUNT,
        ge=MIN_CARD_COUNT,
        le=MAX_CARD_COUNT,
        description="Number of cards to generate",
    )

    @field_validator("count", mode="before")
    @classmethod
    def _default_non_numeric(cls, value: Any) -> Any:
        # Missing or non-numeric counts use the default. Numbers pass through so
        # the int field rejects fractional values and the bounds apply.
        if value is None or isinstance(value, bool):
            return DEFAULT_CARD_COUNT
        if isinstance(value, (int, float)):
            return value
        try:
            float(value)
        except (TypeError, ValueError):
            return DEFAULT_CARD_COUNT
        return value


class CardRead(BaseModel):
    question: str
    answer: str
    order_index: int


class DeckRead(BaseModel):
    id: int
    topic: str
    created_at: str
    cards: list[CardRead] = Field(default_factory=list)


class DeleteDeckResponse(BaseModel):
    message: str
