from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from media_assets.app.settings import AppSettings, get_settings

from .backends import MemoryBackend, S3Backend
from .base import StorageBackend

logger = logging.getLogger(__name__)


def easy_storage(settings: Optional[AppSettings] = None) -> StorageBackend:
    """Build the storage backend selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryBackend()
    if not settings.aws_bucket_name:
        raise ValueError("AWS_BUCKET_NAME must be set when STORAGE_BACKEND=s3")
    return S3Backend(
        bucket=settings.aws_bucket_name,
        region=settings.aws_region,
        endpoint=settings.aws_endpoint_url,
        access_key=settings.aws_access_key_id,
        secret_key=settings.aws_secret_access_key,
        public_base_url=settings.storage_public_url,
    )


def add_storage(app: FastAPI, backend: StorageBackend) -> StorageBackend:
    """Register ``backend`` on app.state and close it on shutdown."""
    app.state.storage = backend
    existing = getattr(app.router, "lifespan_context", None)

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        logger.info("Storage attached: backend=%s", backend.name)
        try:
            if existing:
                async with existing(_app):
                    yield
            else:
                yield
        finally:
            await backend.close()

    app.router.lifespan_context = composed_lifespan
    return backend
