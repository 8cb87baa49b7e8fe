"""Upload pipeline: validate, store every object, then record the batch.

The two side effects are not atomic. When a put fails midway, objects already
written stay in storage; when the final insert fails, every object of the batch
is left without a record. ``rollback_on_failure`` turns on a best-effort
compensating delete for both cases.
"""

from __future__ import annotations

import logging
from typing import Sequence

from media_assets.db.nosql.repository import AssetRecordStore
from media_assets.exceptions import PersistenceError, StorageError, UploadError, ValidationError
from media_assets.storage.base import StorageBackend, guess_content_type
from media_assets.storage.keys import KeyGenerator

from .models import AssetRecord, IncomingFile, NewAssetRecord
from .validation import validate_batch

logger = logging.getLogger(__name__)


class UploadPipeline:
    def __init__(
        self,
        storage: StorageBackend,
        records: AssetRecordStore,
        keys: KeyGenerator,
        *,
        rollback_on_failure: bool = False,
    ):
        self.storage = storage
        self.records = records
        self.keys = keys
        self.rollback_on_failure = rollback_on_failure

    def validate(self, files: Sequence[IncomingFile]) -> None:
        if not files:
            raise ValidationError("File upload failed")
        validate_batch(files)
        for file in files:
            self.keys.check(file.filename)

    async def run(self, files: Sequence[IncomingFile]) -> list[AssetRecord]:
        self.validate(files)

        written: list[str] = []
        candidates: list[NewAssetRecord] = []
        for file in files:
            key = self.keys.key_for(file.filename)
            content_type = guess_content_type(file.filename, file.content_type, file.data)
            try:
                url = await self.storage.put(key, file.data, content_type)
            except StorageError as exc:
                await self._compensate(written)
                raise UploadError(
                    f"Storing '{file.filename}' failed after {len(written)} of {len(files)} files",
                    written_keys=written,
                ) from exc
            written.append(key)
            logger.debug("Stored %s as %s", file.filename, key, extra={"storage_key": key})
            candidates.append(NewAssetRecord(filename=self.keys.display_name(file.filename), file_url=url))

        try:
            saved = await self.records.insert_many(candidates)
        except PersistenceError as exc:
            # records that did land keep their objects
            await self._compensate(written[len(exc.written_ids):])
            raise
        logger.info("Persisted %d asset records", len(saved), extra={"batch_size": len(saved)})
        return saved

    async def _compensate(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        if not self.rollback_on_failure:
            logger.warning("Leaving %d orphan objects in storage: %s", len(keys), ", ".join(keys))
            return
        for key in keys:
            try:
                await self.storage.delete(key)
            except StorageError:
                logger.error("Rollback of %s failed", key, exc_info=True, extra={"storage_key": key})
            else:
                logger.info("Rolled back %s", key, extra={"storage_key": key})
