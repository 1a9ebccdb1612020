"""Prompt building and response extraction for deck generation.

The model is asked for a bare JSON array of ``{question, answer}`` objects.
Models do not always comply, so ``extract_cards`` strips markdown fences and
slices from the first ``[`` to the last ``]`` before parsing. Anything beyond
that is treated as a failed generation.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Optional

from pydantic import ValidationError

from app.core.logging import get_logger
from app.modules.decks.errors import OracleError, ParseError
from app.modules.decks.models import Card, GenerationRequest

if TYPE_CHECKING:
    from app.modules.decks.oracle import TextOracle

MAX_SOURCE_CHARS = 15_000
TOPIC_PREFIX_CHARS = 30

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_SOURCE_CLOSE = "</source_text>"

logger = get_logger(__name__)


def build_prompt(source_text: str, requested_count: int) -> str:
    # A closing tag inside the text would end the block early
    text = source_text[:MAX_SOURCE_CHARS].replace(_SOURCE_CLOSE, "<\\/source_text>")
    return (
        f"Create exactly {requested_count} study flashcards (question and answer) "
        "based on the text below.\n"
        "Return ONLY a raw JSON array of objects. Each object must have exactly two "
        'string fields, "question" and "answer". '
        'Format: [{"question": "...", "answer": "..."}]\n'
        "Do not wrap the output in markdown code blocks or add any commentary.\n"
        f"If the text is too short to support {requested_count} distinct flashcards, "
        "make up additional questions about the same material (for example "
        f"true/false questions) so that there are exactly {requested_count}.\n\n"
        "The source text is between the <source_text> tags.\n"
        f"<source_text>\n{text}\n</source_text>"
    )


def derive_topic(source_text: str) -> str:
    """Short label for a deck: a fixed-length prefix of the source text."""
    return source_text[:TOPIC_PREFIX_CHARS] + "..."


def _to_cards(items: list[Any]) -> list[Card]:
    cards: list[Card] = []
    dropped = 0
    for item in items:
        if not isinstance(item, dict):
            dropped += 1
            continue
        try:
            cards.append(Card.model_validate(item))
        except ValidationError:
            dropped += 1
    if dropped:
        logger.warning(f"Dropped {dropped} malformed card(s) from model output")
    return cards


def extract_cards(raw_text: Optional[str], requested_count: int) -> list[Card]:
    """Recover up to ``requested_count`` cards from free-form model output.

    Order is preserved. A short array is accepted as-is.
    """
    if raw_text is None or not raw_text.strip():
        raise OracleError("Model returned an empty response")

    cleaned = _FENCE_RE.sub("", raw_text).strip()
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end < start:
        raise ParseError("No JSON array found in model output")

    try:
        items = json.loads(cleaned[start : end + 1])
    except (json.JSONDecodeError, RecursionError) as e:
        raise ParseError(f"Model output is not valid JSON: {e}") from e

    cards = _to_cards(items)
    if len(cards) > requested_count:
        logger.info(
            f"Model returned {len(cards)} cards, keeping the first {requested_count}"
        )
        cards = cards[:requested_count]
    return cards


async def generate_cards(oracle: "TextOracle", request: GenerationRequest) -> list[Card]:
    """Prompt the model once and return the validated, truncated cards."""
    prompt = build_prompt(request.source_text, request.requested_count)
    raw = await oracle.complete(prompt)
    return extract_cards(raw, request.requested_count)
