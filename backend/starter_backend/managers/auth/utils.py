"""
Request authentication helpers.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from starter_backend.dependencies import get_settings, get_user_repository
from starter_backend.errors import InvalidTokenError
from starter_backend.managers.auth.security import decode_access_token
from starter_backend.managers.config import AppSettings
from starter_backend.managers.users import UserInDB, UserRepository

logger = logging.getLogger(__name__)


def get_token_from_header(authorization_header: Optional[str]) -> Optional[str]:
    """Extract the token from an "Authorization: Bearer <token>" header."""
    if not authorization_header:
        return None
    scheme, _, token = authorization_header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repository),
) -> UserInDB:
    """Resolve the authenticated user from the bearer token."""
    token = get_token_from_header(request.headers.get("Authorization"))
    if token is None:
        raise _unauthorized("Not authenticated")

    try:
        user_id = decode_access_token(token, settings)
    except InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise _unauthorized(str(e))

    user = await users.get_by_id(user_id)
    if user is None:
        raise _unauthorized("User no longer exists")

    request.state.user_id = user.id
    return user
