"""FastAPI dependency providers shared by the route groups."""

from fastapi import Request

from starter_backend.managers.config import AppSettings
from starter_backend.managers.database import DatabaseManager
from starter_backend.managers.users import UserRepository


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_database_manager(request: Request) -> DatabaseManager:
    return request.app.state.database_manager


def get_user_repository(request: Request) -> UserRepository:
    """Build a repository on the connected database (raises if disconnected)."""
    database_manager: DatabaseManager = request.app.state.database_manager
    return UserRepository(database_manager.get_database())
