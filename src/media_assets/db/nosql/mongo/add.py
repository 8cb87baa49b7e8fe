from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from media_assets.app.settings import AppSettings, get_settings

from ..repository import MongoAssetRepository
from .client import MongoHandle


def add_mongo(app: FastAPI, settings: Optional[AppSettings] = None) -> MongoHandle:
    """Open MongoDB on startup, expose the record repository, close on shutdown."""
    handle = MongoHandle.from_settings(settings or get_settings())
    existing = getattr(app.router, "lifespan_context", None)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await handle.connect()
        _app.state.mongo = handle
        _app.state.records = MongoAssetRepository(handle.collection)
        try:
            if existing:
                async with existing(_app):
                    yield
            else:
                yield
        finally:
            handle.close()

    app.router.lifespan_context = lifespan
    return handle
