from __future__ import annotations

import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from media_assets.app.settings import AppSettings

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "media"


class MongoHandle:
    """Owns the motor client for the lifetime of the process."""

    def __init__(
        self,
        uri: str,
        *,
        db_name: Optional[str] = None,
        collection: str = "files",
        server_selection_timeout_ms: int = 5000,
    ):
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "MongoHandle":
        return cls(
            settings.mongo_uri,
            db_name=settings.mongo_db,
            collection=settings.mongo_collection,
            server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
        )

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            raise RuntimeError("MongoHandle.connect() has not been awaited")
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self.db_name:
            return self.client[self.db_name]
        return self.client.get_default_database(DEFAULT_DB_NAME)

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self.database[self.collection_name]

    async def connect(self, **client_kwargs: Any) -> None:
        """Open the client and fail fast if the server is unreachable."""
        self._client = AsyncIOMotorClient(
            self.uri,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            tz_aware=True,
            **client_kwargs,
        )
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            logger.error("MongoDB connection error", exc_info=True)
            self.close()
            raise
        logger.info(
            "Connected to MongoDB: db=%s collection=%s", self.database.name, self.collection_name
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")
