"""Persistence for user documents in MongoDB."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from starter_backend.errors import UserAlreadyExistsError
from starter_backend.managers.users.user_models import UserInDB

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def _to_object_id(user_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(user_id):
        return None
    return ObjectId(user_id)


class UserRepository:
    """CRUD over the users collection. Emails are stored lower-cased."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database[USERS_COLLECTION]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("email", ASCENDING)], unique=True)
        logger.info("Ensured unique email index on users collection")

    async def create(self, email: str, hashed_password: str, name: str = "") -> UserInDB:
        email = email.lower()
        if await self.collection.find_one({"email": email}) is not None:
            raise UserAlreadyExistsError(f"User with email {email} already exists")

        now = datetime.now(timezone.utc)
        doc: Dict[str, Any] = {
            "email": email,
            "name": name,
            "hashed_password": hashed_password,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError(f"User with email {email} already exists") from e

        doc["_id"] = result.inserted_id
        logger.info(f"Created user {doc['_id']}")
        return UserInDB.from_document(doc)

    async def get_by_id(self, user_id: str) -> Optional[UserInDB]:
        oid = _to_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return UserInDB.from_document(doc) if doc else None

    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        doc = await self.collection.find_one({"email": email.lower()})
        return UserInDB.from_document(doc) if doc else None

    async def list(self, limit: int = 50, skip: int = 0) -> List[UserInDB]:
        cursor = self.collection.find({}).sort("created_at", ASCENDING).skip(skip).limit(limit)
        return [UserInDB.from_document(doc) async for doc in cursor]

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[UserInDB]:
        """Apply a partial update; returns the updated user or None if missing."""
        oid = _to_object_id(user_id)
        if oid is None:
            return None
        changes = {k: v for k, v in fields.items() if v is not None}
        changes["updated_at"] = datetime.now(timezone.utc)
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return UserInDB.from_document(doc) if doc else None

    async def delete(self, user_id: str) -> bool:
        oid = _to_object_id(user_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count == 1
