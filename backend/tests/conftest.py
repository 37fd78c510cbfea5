"""Shared fixtures: test settings, an in-memory user store and a wired app."""

import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Must be set before starter_backend is imported
os.environ.setdefault("APP_LOG_DIR", tempfile.mkdtemp(prefix="starter-logs-"))
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from starter_backend.dependencies import get_user_repository
from starter_backend.errors import UserAlreadyExistsError
from starter_backend.main import create_app
from starter_backend.managers.config import AppSettings
from starter_backend.managers.database import DatabaseManager
from starter_backend.managers.users import UserInDB

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class FakeUserRepository:
    """In-memory stand-in for UserRepository used by route tests."""

    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {}

    async def ensure_indexes(self) -> None:
        return None

    async def create(self, email: str, hashed_password: str, name: str = "") -> UserInDB:
        email = email.lower()
        if any(doc["email"] == email for doc in self.users.values()):
            raise UserAlreadyExistsError(f"User with email {email} already exists")
        now = datetime.now(timezone.utc)
        doc = {
            "_id": ObjectId(),
            "email": email,
            "name": name,
            "hashed_password": hashed_password,
            "created_at": now,
            "updated_at": now,
        }
        self.users[str(doc["_id"])] = doc
        return UserInDB.from_document(doc)

    async def get_by_id(self, user_id: str) -> Optional[UserInDB]:
        doc = self.users.get(user_id)
        return UserInDB.from_document(doc) if doc else None

    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        for doc in self.users.values():
            if doc["email"] == email.lower():
                return UserInDB.from_document(doc)
        return None

    async def list(self, limit: int = 50, skip: int = 0) -> List[UserInDB]:
        docs = sorted(self.users.values(), key=lambda d: d["created_at"])
        return [UserInDB.from_document(d) for d in docs[skip : skip + limit]]

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[UserInDB]:
        doc = self.users.get(user_id)
        if doc is None:
            return None
        doc.update({k: v for k, v in fields.items() if v is not None})
        doc["updated_at"] = datetime.now(timezone.utc)
        return UserInDB.from_document(doc)

    async def delete(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None


def make_settings(**overrides) -> AppSettings:
    values = {
        "secret_key": TEST_SECRET,
        "environment": "test",
        "rate_limit_enabled": False,
        "frontend_dist_dir": "does-not-exist/dist",
    }
    values.update(overrides)
    return AppSettings(**values)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def fake_users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def database_manager():
    """Mock DatabaseManager whose database accepts index creation."""
    manager = MagicMock(spec=DatabaseManager)
    manager.connect = AsyncMock()
    manager.close = AsyncMock()
    manager.ping = AsyncMock(return_value=True)
    database = MagicMock()
    database.__getitem__.return_value.create_index = AsyncMock()
    manager.get_database.return_value = database
    return manager


@pytest.fixture
def app(settings, database_manager, fake_users):
    application = create_app(
        settings=settings, database_manager=database_manager, configure_logging=False
    )
    application.dependency_overrides[get_user_repository] = lambda: fake_users
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def register_user(client):
    """Register a user through the API and return (user_json, auth_headers)."""

    def _register(email: str = "ada@example.com", password: str = "correct-horse", name: str = "Ada"):
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['access_token']}"}

    return _register
