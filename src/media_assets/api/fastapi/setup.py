from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from media_assets import __version__
from media_assets.app.settings import AppSettings, get_settings
from media_assets.db.nosql.mongo import add_mongo
from media_assets.db.nosql.repository import AssetRecordStore
from media_assets.storage import StorageBackend, add_storage, easy_storage
from media_assets.storage.keys import KeyGenerator

from .middleware.errors import CatchAllExceptionMiddleware, register_error_handlers
from .middleware.request_size_limit import RequestSizeLimitMiddleware
from .routers import assets_router, health_router

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    storage: Optional[StorageBackend] = None,
    records: Optional[AssetRecordStore] = None,
    keys: Optional[KeyGenerator] = None,
) -> FastAPI:
    """Build the asset API.

    MongoDB is opened in the lifespan unless ``records`` is supplied; the
    storage backend comes from settings unless ``storage`` is supplied.
    """
    settings = settings or get_settings()

    # no docs routes: every unclaimed path answers with the banner
    app = FastAPI(
        title="media-assets",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.keys = keys or KeyGenerator(strict=settings.strict_filenames)

    register_error_handlers(app)
    app.add_middleware(CatchAllExceptionMiddleware)
    if settings.max_upload_bytes:
        app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if records is None:
        add_mongo(app, settings)
    else:
        app.state.records = records
    add_storage(app, storage or easy_storage(settings))

    app.include_router(health_router)
    app.include_router(assets_router)

    banner = f"Server running on - {settings.base_url}"

    # Registered last: anything no other route claims gets the banner.
    @app.api_route("/{path:path}", methods=_ALL_METHODS, include_in_schema=False)
    async def fallback(path: str) -> PlainTextResponse:
        return PlainTextResponse(banner)

    return app
