from .user_models import (
    AuthResponse,
    TokenResponse,
    UserCreate,
    UserInDB,
    UserLogin,
    UserPublic,
    UserUpdate,
)
from .user_repository import UserRepository

__all__ = [
    "AuthResponse",
    "TokenResponse",
    "UserCreate",
    "UserInDB",
    "UserLogin",
    "UserPublic",
    "UserRepository",
    "UserUpdate",
]
