from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.modules.auth import (
    fastapi_users,
    auth_backend,
    get_jwt_strategy,
    UserRead,
    UserCreate,
)


router = APIRouter()


@router.get("/.well-known/jwks.json", tags=["auth"])
async def jwks():
    """JWKS endpoint for public key distribution"""
    return JSONResponse(content=get_jwt_strategy().get_jwks())


# POST /login (form: username, password) -> {access_token, token_type}
router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix=f"/{settings.app.version}/auth",
    tags=["auth"],
)

router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix=f"/{settings.app.version}/auth",
    tags=["auth"],
)
