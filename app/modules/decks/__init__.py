"""Deck generation module exports."""

from .errors import (
    GenerationError,
    InputError,
    OracleError,
    ParseError,
    PersistenceError,
)
from .generator import build_prompt, derive_topic, extract_cards, generate_cards
from .models import Card, GenerationRequest, normalize_card_count
from .oracle import TextOracle
from .service import DeckGenerationService

__all__ = [
    "Card",
    "GenerationRequest",
    "normalize_card_count",
    "build_prompt",
    "derive_topic",
    "extract_cards",
    "generate_cards",
    "TextOracle",
    "DeckGenerationService",
    "GenerationError",
    "InputError",
    "OracleError",
    "ParseError",
    "PersistenceError",
]
