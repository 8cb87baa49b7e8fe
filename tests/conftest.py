"""
Root conftest.py for media-assets tests.

Provides:
1. Marker registration
2. In-memory collaborators (object storage, record store) and a pinned key generator
3. The FastAPI app and an httpx client wired to those collaborators
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Sequence

import pytest
import pytest_asyncio
from bson import ObjectId
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from media_assets.api.fastapi import create_app
from media_assets.app.settings import AppSettings
from media_assets.assets.models import AssetRecord, NewAssetRecord
from media_assets.exceptions import NotFoundError
from media_assets.storage.backends.memory import MemoryBackend
from media_assets.storage.keys import KeyGenerator

FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
BASE_URL = "http://assets.example.test"
# PNG signature plus a 1x1 IHDR chunk
PNG_HEADER = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
)


def pytest_configure(config):
    # Ensure custom markers are registered even if pyproject.toml isn't picked up
    for name, desc in [
        ("storage", "Object storage backends and key generation"),
        ("db", "Document store repository"),
        ("api", "FastAPI routes"),
        ("acceptance", "End-to-end scenarios against in-memory collaborators"),
    ]:
        config.addinivalue_line("markers", f"{name}: {desc}")


# =============================================================================
# IN-MEMORY RECORD STORE
# =============================================================================


class InMemoryAssetRepository:
    """Record store fake with the MongoAssetRepository interface.

    Set ``fail_with`` to make the next ``insert_many`` raise.
    """

    def __init__(self):
        self.records: dict[str, AssetRecord] = {}
        self.fail_with: Exception | None = None
        self.healthy = True

    async def insert_many(self, records: Sequence[NewAssetRecord]) -> list[AssetRecord]:
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc
        saved = []
        for rec in records:
            stored = AssetRecord(
                id=str(ObjectId()),
                filename=rec.filename,
                file_url=rec.file_url,
                uploaded_at=rec.uploaded_at,
            )
            self.records[stored.id] = stored
            saved.append(stored)
        return saved

    async def find_all(self) -> list[AssetRecord]:
        return list(self.records.values())

    async def find_by_id(self, record_id: str) -> AssetRecord | None:
        return self.records.get(record_id)

    async def delete_by_id(self, record_id: str) -> None:
        if self.records.pop(record_id, None) is None:
            raise NotFoundError(record_id)

    async def ping(self) -> bool:
        return self.healthy


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        app_env="test",
        storage_backend="memory",
        base_url=BASE_URL,
    )


@pytest.fixture
def storage() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def records() -> InMemoryAssetRepository:
    return InMemoryAssetRepository()


@pytest.fixture
def keys() -> KeyGenerator:
    """Key generator with a pinned date and seeded random source."""
    return KeyGenerator(clock=lambda: FIXED_NOW, rng=random.Random(1234))


@pytest.fixture
def app(settings, storage, records, keys) -> FastAPI:
    return create_app(settings, storage=storage, records=records, keys=keys)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
