"""Database service classes for deck storage."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.db.schemas.decks import Card, Deck
from app.modules.decks.models import Card as PydanticCard


class DeckStore:
    """Service for storing and reading a user's decks.

    Every query is scoped to ``owner_id``; a deck owned by someone else looks
    exactly like a deck that does not exist.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_deck(
        self,
        *,
        owner_id: int,
        topic: str,
        cards: Sequence[PydanticCard],
    ) -> Deck:
        """Insert a deck and its cards in one commit."""
        deck = Deck(
            owner_id=owner_id,
            topic=topic,
            cards=[
                Card(question=c.question, answer=c.answer, order_index=i)
                for i, c in enumerate(cards)
            ],
        )
        self.session.add(deck)
        await self.session.commit()

        # Reload so server-side defaults (created_at) are populated
        result = await self.session.execute(
            select(Deck)
            .options(selectinload(Deck.cards))
            .where(Deck.id == deck.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def list_decks(self, owner_id: int) -> list[Deck]:
        """Owner's decks, newest first."""
        result = await self.session.execute(
            select(Deck)
            .options(selectinload(Deck.cards))
            .where(Deck.owner_id == owner_id)
            .order_by(Deck.created_at.desc(), Deck.id.desc())
        )
        return list(result.scalars().all())

    async def get_deck(self, owner_id: int, deck_id: int) -> Optional[Deck]:
        result = await self.session.execute(
            select(Deck)
            .options(selectinload(Deck.cards))
            .where(Deck.id == deck_id, Deck.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def delete_deck(self, owner_id: int, deck_id: int) -> bool:
        """Delete a deck with its cards. Returns False when nothing matched."""
        deck = await self.get_deck(owner_id, deck_id)
        if not deck:
            return False
        await self.session.delete(deck)
        await self.session.commit()
        return True
