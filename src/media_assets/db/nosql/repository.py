from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

import pydantic
from bson import ObjectId
from pymongo.errors import BulkWriteError, PyMongoError

from media_assets.assets.models import AssetRecord, NewAssetRecord
from media_assets.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class AssetRecordStore(Protocol):
    async def insert_many(self, records: Sequence[NewAssetRecord]) -> list[AssetRecord]: ...

    async def find_all(self) -> list[AssetRecord]: ...

    async def find_by_id(self, record_id: str) -> AssetRecord | None: ...

    async def delete_by_id(self, record_id: str) -> None: ...

    async def ping(self) -> bool: ...


def _object_id(record_id: str) -> ObjectId | None:
    return ObjectId(record_id) if ObjectId.is_valid(record_id) else None


def _to_record(doc: dict[str, Any]) -> AssetRecord:
    try:
        return AssetRecord.from_document(doc)
    except pydantic.ValidationError as exc:
        raise PersistenceError(f"Malformed asset record {doc.get('_id')}: {exc}") from exc


class MongoAssetRepository:
    """Asset records in a MongoDB collection (motor).

    Reads return store-native order. Malformed ids behave like unknown ids.
    """

    def __init__(self, collection: Any):
        self.collection = collection

    async def insert_many(self, records: Sequence[NewAssetRecord]) -> list[AssetRecord]:
        if not records:
            return []
        docs = [r.to_document() for r in records]
        try:
            result = await self.collection.insert_many(docs, ordered=True)
        except BulkWriteError as exc:
            inserted = int(exc.details.get("nInserted", 0))
            # ordered insert: the first `inserted` documents made it
            written = [str(d["_id"]) for d in docs[:inserted] if "_id" in d]
            raise PersistenceError(
                f"Bulk insert stopped after {inserted} of {len(docs)} records",
                written_ids=written,
            ) from exc
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to insert {len(docs)} records: {exc}") from exc
        return [
            _to_record({**doc, "_id": oid})
            for doc, oid in zip(docs, result.inserted_ids)
        ]

    async def find_all(self) -> list[AssetRecord]:
        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to list records: {exc}") from exc
        return [_to_record(d) for d in docs]

    async def find_by_id(self, record_id: str) -> AssetRecord | None:
        oid = _object_id(record_id)
        if oid is None:
            return None
        try:
            doc = await self.collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load record {record_id}: {exc}") from exc
        return _to_record(doc) if doc else None

    async def delete_by_id(self, record_id: str) -> None:
        oid = _object_id(record_id)
        if oid is None:
            raise NotFoundError(record_id)
        try:
            result = await self.collection.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to delete record {record_id}: {exc}") from exc
        if result.deleted_count == 0:
            raise NotFoundError(record_id)

    async def ping(self) -> bool:
        try:
            await self.collection.database.command("ping")
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False
        return True
