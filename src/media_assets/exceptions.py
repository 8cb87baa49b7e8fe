"""Error taxonomy shared by the storage, database and pipeline layers.

Adapters translate library exceptions (botocore, pymongo) into these types; the
HTTP layer maps them onto fixed user-facing messages.
"""

from __future__ import annotations

from typing import Sequence


class AssetManagerError(Exception):
    """Base class for every error raised by media_assets."""


class ValidationError(AssetManagerError):
    """Input that the caller can correct (bad file type, malformed name)."""


class StorageError(AssetManagerError):
    """Object storage backend failure."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key


class StorageWriteError(StorageError):
    pass


class StorageDeleteError(StorageError):
    pass


class UploadError(AssetManagerError):
    """A batch upload failed while writing objects to storage."""

    def __init__(self, message: str, *, written_keys: Sequence[str] = ()):
        super().__init__(message)
        self.written_keys = list(written_keys)


class PersistenceError(AssetManagerError):
    """Document store read or write failure.

    ``written_ids`` lists the records that did reach the store before a bulk
    write failed, so partial success is visible to callers.
    """

    def __init__(self, message: str, *, written_ids: Sequence[str] = ()):
        super().__init__(message)
        self.written_ids = list(written_ids)


class NotFoundError(AssetManagerError):
    """Referenced record does not exist."""


__all__ = [
    "AssetManagerError",
    "ValidationError",
    "StorageError",
    "StorageWriteError",
    "StorageDeleteError",
    "UploadError",
    "PersistenceError",
    "NotFoundError",
]
