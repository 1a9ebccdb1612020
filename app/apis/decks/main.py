from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import current_user_or_query_token, get_oracle
from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas.auth import User
from app.core.db.schemas.decks import Deck
from app.core.db_services import DeckStore
from app.modules.decks.errors import GenerationError, InputError
from app.modules.decks.oracle import TextOracle
from app.modules.decks.service import DeckGenerationService
from .schemas import CardRead, DeckRead, DeleteDeckResponse, GenerateDeckRequest


router = APIRouter()

CurrentUser = Annotated[User, Depends(current_user_or_query_token)]

GENERATION_FAILED = "Generation Failed. Try again later."


def _deck_read(d: Deck) -> DeckRead:
    return DeckRead(
        id=d.id,
        topic=d.topic,
        created_at=d.created_at.isoformat(),
        cards=[
            CardRead(question=c.question, answer=c.answer, order_index=c.order_index)
            for c in (d.cards or [])
        ],
    )


@router.post(
    f"/{settings.app.version}/decks/generate",
    response_model=DeckRead,
    status_code=status.HTTP_201_CREATED,
    tags=["decks"],
)
async def generate_deck(
    req: GenerateDeckRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
    oracle: TextOracle = Depends(get_oracle),
) -> DeckRead:
    service = DeckGenerationService(session, oracle)
    try:
        deck = await service.generate(req.text, req.count, owner_id=user.id)
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GenerationError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERATION_FAILED,
        )
    return _deck_read(deck)


@router.get(
    f"/{settings.app.version}/decks",
    response_model=list[DeckRead],
    tags=["decks"],
)
async def list_decks(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> list[DeckRead]:
    decks = await DeckStore(session).list_decks(user.id)
    return [_deck_read(d) for d in decks]


@router.get(
    f"/{settings.app.version}/decks/{{deck_id:int}}",
    response_model=DeckRead,
    tags=["decks"],
)
async def get_deck(
    deck_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DeckRead:
    deck = await DeckStore(session).get_deck(user.id, deck_id)
    if not deck:
        raise HTTPException(status_code=404, detail="Deck not found")
    return _deck_read(deck)


@router.delete(
    f"/{settings.app.version}/decks/{{deck_id:int}}",
    response_model=DeleteDeckResponse,
    tags=["decks"],
)
async def delete_deck(
    deck_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DeleteDeckResponse:
    deleted = await DeckStore(session).delete_deck(user.id, deck_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Deck not found")
    return DeleteDeckResponse(message="Deck deleted")
