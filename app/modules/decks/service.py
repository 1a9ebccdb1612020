"""Deck generation service.

Runs the whole pipeline for one request: validate input, prompt the model,
extract cards, persist the deck. Nothing is written unless every earlier step
succeeded, and nothing is retried.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.schemas.decks import Deck
from app.core.db_services import DeckStore
from app.core.logging import get_context_logger
from app.modules.decks.errors import GenerationError, InputError, PersistenceError
from app.modules.decks.generator import derive_topic, generate_cards
from app.modules.decks.models import GenerationRequest
from app.modules.decks.oracle import TextOracle


class DeckGenerationService:
    """Generates a deck from source text and stores it for the owner."""

    def __init__(self, session: AsyncSession, oracle: TextOracle) -> None:
        self.session = session
        self.oracle = oracle
        self.store = DeckStore(session)

    async def generate(
        self,
        source_text: str | None,
        requested_count: Any,
        *,
        owner_id: int,
    ) -> Deck:
        log = get_context_logger(__name__, user_id=owner_id)

        if source_text is None or not source_text.strip():
            raise InputError("Source text is required")

        request = GenerationRequest(
            source_text=source_text, requested_count=requested_count
        )
        log.info(
            f"Generating {request.requested_count} cards from "
            f"{len(request.source_text)} chars of text"
        )

        try:
            cards = await generate_cards(self.oracle, request)
        except GenerationError as e:
            log.warning(f"Generation failed: {type(e).__name__}: {e}")
            raise

        if len(cards) < request.requested_count:
            log.info(
                f"Model under-delivered: {len(cards)} of {request.requested_count} cards"
            )

        try:
            deck = await self.store.insert_deck(
                owner_id=owner_id,
                topic=derive_topic(request.source_text),
                cards=cards,
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error(f"Could not persist deck: {e}")
            raise PersistenceError("Could not save deck") from e

        log.info(f"Deck saved with {len(deck.cards)} cards", extra={"deck_id": deck.id})
        return deck
