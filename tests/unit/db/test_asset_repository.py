"""Unit tests for MongoAssetRepository against a mocked motor collection."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from bson import ObjectId
from pymongo.errors import BulkWriteError, ServerSelectionTimeoutError

from media_assets.assets.models import NewAssetRecord
from media_assets.db.nosql.repository import MongoAssetRepository
from media_assets.exceptions import NotFoundError, PersistenceError

UPLOADED = datetime(2026, 10, 19, 9, 30, 12, 345000, tzinfo=timezone.utc)


@pytest.fixture
def mock_collection():
    collection = Mock()
    collection.insert_many = AsyncMock()
    collection.find_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.find = Mock()
    collection.database.command = AsyncMock(return_value={"ok": 1})
    return collection


@pytest.fixture
def repo(mock_collection):
    return MongoAssetRepository(mock_collection)


def _candidate(name: str) -> NewAssetRecord:
    return NewAssetRecord(
        filename=name,
        file_url=f"https://assets.s3.us-east-1.amazonaws.com/{name}-20261019123456",
        uploaded_at=UPLOADED,
    )


@pytest.mark.db
@pytest.mark.asyncio
class TestInsertMany:
    async def test_returns_saved_records_in_input_order(self, repo, mock_collection):
        ids = [ObjectId(), ObjectId()]
        mock_collection.insert_many.return_value = Mock(inserted_ids=ids)

        saved = await repo.insert_many([_candidate("photo"), _candidate("scan")])

        assert [r.id for r in saved] == [str(i) for i in ids]
        assert [r.filename for r in saved] == ["photo", "scan"]
        assert saved[0].uploaded_at == UPLOADED
        docs = mock_collection.insert_many.await_args.args[0]
        assert docs[0] == {
            "filename": "photo",
            "fileUrl": "https://assets.s3.us-east-1.amazonaws.com/photo-20261019123456",
            "uploadedAt": UPLOADED,
        }
        assert mock_collection.insert_many.await_args.kwargs == {"ordered": True}

    async def test_empty_batch_skips_store(self, repo, mock_collection):
        assert await repo.insert_many([]) == []
        mock_collection.insert_many.assert_not_awaited()

    async def test_partial_write_is_surfaced(self, repo, mock_collection):
        first = ObjectId()

        async def _partial(docs, ordered):
            docs[0]["_id"] = first
            docs[1]["_id"] = ObjectId()
            raise BulkWriteError({"nInserted": 1, "writeErrors": [{"index": 1, "code": 11000}]})

        mock_collection.insert_many.side_effect = _partial

        with pytest.raises(PersistenceError) as exc_info:
            await repo.insert_many([_candidate("photo"), _candidate("scan")])

        assert exc_info.value.written_ids == [str(first)]

    async def test_server_failure(self, repo, mock_collection):
        mock_collection.insert_many.side_effect = ServerSelectionTimeoutError("no primary")

        with pytest.raises(PersistenceError) as exc_info:
            await repo.insert_many([_candidate("photo")])

        assert exc_info.value.written_ids == []


@pytest.mark.db
@pytest.mark.asyncio
class TestReads:
    async def test_find_all(self, repo, mock_collection):
        oid = ObjectId()
        cursor = Mock()
        cursor.to_list = AsyncMock(
            return_value=[
                {
                    "_id": oid,
                    "filename": "photo",
                    "fileUrl": "https://x/photo-1",
                    "uploadedAt": UPLOADED,
                    "__v": 0,
                }
            ]
        )
        mock_collection.find.return_value = cursor

        records = await repo.find_all()

        assert len(records) == 1
        assert records[0].id == str(oid)
        assert records[0].file_url == "https://x/photo-1"
        mock_collection.find.assert_called_once_with({})
        cursor.to_list.assert_awaited_once_with(length=None)

    async def test_find_all_naive_datetime_is_utc(self, repo, mock_collection):
        cursor = Mock()
        cursor.to_list = AsyncMock(
            return_value=[
                {
                    "_id": ObjectId(),
                    "filename": "photo",
                    "fileUrl": "https://x/photo-1",
                    "uploadedAt": UPLOADED.replace(tzinfo=None),
                }
            ]
        )
        mock_collection.find.return_value = cursor

        (record,) = await repo.find_all()

        assert record.uploaded_at == UPLOADED

    async def test_find_all_failure(self, repo, mock_collection):
        cursor = Mock()
        cursor.to_list = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        mock_collection.find.return_value = cursor

        with pytest.raises(PersistenceError):
            await repo.find_all()

    async def test_find_all_malformed_document(self, repo, mock_collection):
        cursor = Mock()
        cursor.to_list = AsyncMock(return_value=[{"_id": ObjectId(), "filename": "photo"}])
        mock_collection.find.return_value = cursor

        with pytest.raises(PersistenceError, match="Malformed asset record"):
            await repo.find_all()

    async def test_find_by_id(self, repo, mock_collection):
        oid = ObjectId()
        mock_collection.find_one.return_value = {
            "_id": oid,
            "filename": "photo",
            "fileUrl": "https://x/photo-1",
            "uploadedAt": UPLOADED,
        }

        record = await repo.find_by_id(str(oid))

        assert record is not None and record.id == str(oid)
        mock_collection.find_one.assert_awaited_once_with({"_id": oid})

    async def test_find_by_id_malformed_document(self, repo, mock_collection):
        oid = ObjectId()
        mock_collection.find_one.return_value = {"_id": oid, "fileUrl": "https://x/photo-1", "uploadedAt": "yesterday"}

        with pytest.raises(PersistenceError):
            await repo.find_by_id(str(oid))

    async def test_find_by_id_missing(self, repo, mock_collection):
        mock_collection.find_one.return_value = None
        assert await repo.find_by_id(str(ObjectId())) is None

    async def test_find_by_malformed_id(self, repo, mock_collection):
        assert await repo.find_by_id("not-an-object-id") is None
        mock_collection.find_one.assert_not_awaited()


@pytest.mark.db
@pytest.mark.asyncio
class TestDeleteById:
    async def test_delete(self, repo, mock_collection):
        oid = ObjectId()
        mock_collection.delete_one.return_value = Mock(deleted_count=1)

        await repo.delete_by_id(str(oid))

        mock_collection.delete_one.assert_awaited_once_with({"_id": oid})

    async def test_delete_missing(self, repo, mock_collection):
        mock_collection.delete_one.return_value = Mock(deleted_count=0)

        with pytest.raises(NotFoundError):
            await repo.delete_by_id(str(ObjectId()))

    async def test_delete_malformed_id(self, repo, mock_collection):
        with pytest.raises(NotFoundError):
            await repo.delete_by_id("nope")
        mock_collection.delete_one.assert_not_awaited()

    async def test_delete_failure(self, repo, mock_collection):
        mock_collection.delete_one.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(PersistenceError):
            await repo.delete_by_id(str(ObjectId()))


@pytest.mark.db
@pytest.mark.asyncio
class TestPing:
    async def test_ping_ok(self, repo, mock_collection):
        assert await repo.ping() is True
        mock_collection.database.command.assert_awaited_once_with("ping")

    async def test_ping_failure(self, repo, mock_collection):
        mock_collection.database.command.side_effect = ServerSelectionTimeoutError("down")
        assert await repo.ping() is False
