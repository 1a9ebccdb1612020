from app.core.db.schemas.auth import User
from .users import (
    UserCreate,
    UserRead,
    UserManager,
    get_user_db,
    get_user_manager,
    get_jwt_strategy,
    auth_backend,
    fastapi_users,
)

__all__ = [
    "User",
    "UserCreate",
    "UserRead",
    "UserManager",
    "get_user_db",
    "get_user_manager",
    "get_jwt_strategy",
    "auth_backend",
    "fastapi_users",
]
