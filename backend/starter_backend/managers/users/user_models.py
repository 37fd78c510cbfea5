"""User models for the users collection and its API surface."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    """Registration payload."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    name: str = Field(default="", max_length=100)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    """Profile changes; omitted fields are left untouched."""

    name: Optional[str] = Field(default=None, max_length=100)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)


class UserPublic(BaseModel):
    id: str
    email: EmailStr
    name: str = ""
    created_at: datetime
    updated_at: datetime


class UserInDB(UserPublic):
    hashed_password: str

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserInDB":
        return cls(
            id=str(doc["_id"]),
            email=doc["email"],
            name=doc.get("name", ""),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
            hashed_password=doc["hashed_password"],
        )

    def to_public(self) -> UserPublic:
        return UserPublic(**self.model_dump(exclude={"hashed_password"}))


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(TokenResponse):
    user: UserPublic
