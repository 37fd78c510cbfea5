"""MongoDB connection management on top of motor's pooled async client."""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from starter_backend.errors import DatabaseConnectionError
from starter_backend.managers.config.config_models import AppSettings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the MongoDB client for the lifetime of the process."""

    def __init__(self, settings: AppSettings):
        self.settings = settings
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _create_client(self) -> AsyncIOMotorClient:
        return AsyncIOMotorClient(
            self.settings.mongodb_uri,
            maxPoolSize=self.settings.mongodb_max_pool_size,
            socketTimeoutMS=self.settings.mongodb_socket_timeout_ms,
            serverSelectionTimeoutMS=self.settings.mongodb_server_selection_timeout_ms,
        )

    async def connect(self) -> None:
        """Create the client and verify the server answers a ping."""
        if self._client is not None:
            return

        client = self._create_client()
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error(f"MongoDB connection failed: {e}")
            raise DatabaseConnectionError(f"Could not connect to MongoDB: {e}") from e

        self._client = client
        logger.info(
            f"MongoDB connected (db={self.settings.mongodb_db_name}, "
            f"maxPoolSize={self.settings.mongodb_max_pool_size}, "
            f"socketTimeoutMS={self.settings.mongodb_socket_timeout_ms})"
        )

    async def close(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        logger.info("MongoDB connection closed")

    def get_database(self) -> AsyncIOMotorDatabase:
        if self._client is None:
            raise DatabaseConnectionError("MongoDB client is not connected")
        return self._client[self.settings.mongodb_db_name]

    async def ping(self) -> bool:
        """Return True when the server answers, never raises."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False
