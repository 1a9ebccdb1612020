from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from app.core.db.schemas.auth import User
from app.modules.auth.users import get_user_manager, get_jwt_strategy
from app.modules.decks.oracle import TextOracle


def _extract_token(authorization: Optional[str], access_token: Optional[str]) -> Optional[str]:
    if authorization:
        value = authorization.strip()
        if value.lower().startswith("bearer "):
            return value.split(" ", 1)[1].strip() or None
        return value or None
    return access_token or None


async def current_user_or_query_token(
    access_token: Optional[str] = None,
    authorization: Optional[str] = Header(default=None),
    user_manager=Depends(get_user_manager),
) -> User:
    """Resolve current user from the Authorization header or `access_token` query param.

    The header may carry either ``Bearer <token>`` or the bare token, which is
    what the web client sends.
    """
    token = _extract_token(authorization, access_token)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    strategy = get_jwt_strategy()
    user = await strategy.read_token(token, user_manager)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def get_oracle(request: Request) -> TextOracle:
    """Process-wide oracle created in the app lifespan."""
    oracle = getattr(request.app.state, "oracle", None)
    if oracle is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Generation is not available",
        )
    return oracle
