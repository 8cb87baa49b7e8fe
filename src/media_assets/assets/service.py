from __future__ import annotations

import logging
from typing import Optional, Sequence

from media_assets.app.settings import AppSettings
from media_assets.db.nosql.repository import AssetRecordStore
from media_assets.exceptions import NotFoundError
from media_assets.storage.base import StorageBackend
from media_assets.storage.keys import KeyGenerator, key_from_url

from .models import AssetRecord, IncomingFile
from .pipeline import UploadPipeline

logger = logging.getLogger(__name__)


class AssetService:
    """Create, list and delete assets across object storage and the record store."""

    def __init__(
        self,
        storage: StorageBackend,
        records: AssetRecordStore,
        keys: Optional[KeyGenerator] = None,
        *,
        rollback_on_failure: bool = False,
    ):
        self.storage = storage
        self.records = records
        self.pipeline = UploadPipeline(
            storage,
            records,
            keys or KeyGenerator(),
            rollback_on_failure=rollback_on_failure,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        storage: StorageBackend,
        records: AssetRecordStore,
        keys: Optional[KeyGenerator] = None,
    ) -> "AssetService":
        return cls(
            storage,
            records,
            keys or KeyGenerator(strict=settings.strict_filenames),
            rollback_on_failure=settings.rollback_on_failure,
        )

    async def create(self, files: Sequence[IncomingFile]) -> list[AssetRecord]:
        return await self.pipeline.run(files)

    async def list(self) -> list[AssetRecord]:
        return await self.records.find_all()

    async def delete(self, record_id: str) -> None:
        """Delete the stored object, then the record.

        The record is kept when the storage delete fails. An object that is
        already gone does not block removing the record.
        """
        record = await self.records.find_by_id(record_id)
        if record is None:
            raise NotFoundError(record_id)

        key = key_from_url(record.file_url)
        removed = await self.storage.delete(key)
        if not removed:
            logger.warning(
                "Object %s for record %s was already absent",
                key,
                record_id,
                extra={"asset_id": record_id, "storage_key": key},
            )
        await self.records.delete_by_id(record_id)
        logger.info("Deleted asset %s", record_id, extra={"asset_id": record_id, "storage_key": key})
