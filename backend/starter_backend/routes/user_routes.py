"""
User routes.

Every endpoint requires a bearer token. Users may list and view profiles,
and may only change or delete their own account.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from starlette.concurrency import run_in_threadpool

from starter_backend.dependencies import get_user_repository
from starter_backend.managers.auth import get_current_user, get_password_hash
from starter_backend.managers.users import UserInDB, UserPublic, UserRepository, UserUpdate

logger = logging.getLogger(__name__)

users_router = APIRouter(prefix="/api/users", tags=["users"])


@users_router.get("", response_model=List[UserPublic])
@users_router.get("/", response_model=List[UserPublic], include_in_schema=False)
async def list_users(
    limit: int = Query(default=50, ge=1, le=200),
    skip: int = Query(default=0, ge=0),
    current_user: UserInDB = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> List[UserPublic]:
    return [user.to_public() for user in await users.list(limit=limit, skip=skip)]


@users_router.patch("/me", response_model=UserPublic)
async def update_me(
    payload: UserUpdate,
    current_user: UserInDB = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> UserPublic:
    fields = {"name": payload.name}
    if payload.password is not None:
        fields["hashed_password"] = await run_in_threadpool(get_password_hash, payload.password)

    updated = await users.update(current_user.id, fields)
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"Updated user {updated.id}")
    return updated.to_public()


@users_router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    current_user: UserInDB = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> Response:
    if not await users.delete(current_user.id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"Deleted user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@users_router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: str,
    current_user: UserInDB = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> UserPublic:
    user = await users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user.to_public()
