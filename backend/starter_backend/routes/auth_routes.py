"""Authentication routes: register, login and the current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from starter_backend.dependencies import get_settings, get_user_repository
from starter_backend.managers.auth import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from starter_backend.managers.config import AppSettings
from starter_backend.managers.users import (
    AuthResponse,
    TokenResponse,
    UserCreate,
    UserInDB,
    UserLogin,
    UserPublic,
    UserRepository,
)

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(user: UserInDB, settings: AppSettings) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, settings),
        expires_in=settings.access_token_expire_minutes * 60,
    )


@auth_router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repository),
) -> AuthResponse:
    """Create an account and return a token for it."""
    # Hashing is CPU-bound; keep it off the event loop
    hashed_password = await run_in_threadpool(get_password_hash, payload.password)
    # UserAlreadyExistsError is mapped to 409 by the app-level handler
    user = await users.create(
        email=payload.email,
        hashed_password=hashed_password,
        name=payload.name,
    )
    logger.info(f"Registered user {user.id}")
    token = _token_response(user, settings)
    return AuthResponse(**token.model_dump(), user=user.to_public())


@auth_router.post("/login", response_model=TokenResponse)
async def login(
    payload: UserLogin,
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repository),
) -> TokenResponse:
    user = await users.get_by_email(payload.email)
    valid = user is not None and await run_in_threadpool(
        verify_password, payload.password, user.hashed_password
    )
    if not valid:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(user, settings)


@auth_router.get("/me", response_model=UserPublic)
async def me(current_user: UserInDB = Depends(get_current_user)) -> UserPublic:
    return current_user.to_public()
