from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

import magic

from media_assets.exceptions import StorageDeleteError, StorageError, StorageWriteError

DEFAULT_CONTENT_TYPE = "application/octet-stream"
SNIFF_BYTES = 2048

# libmagic answers for content it cannot place
_UNDETECTED = {DEFAULT_CONTENT_TYPE, "text/plain", "application/x-empty", "inode/x-empty"}


def sniff_content_type(data: bytes) -> Optional[str]:
    """MIME type libmagic reads from the leading bytes, or None when it cannot tell."""
    if not data:
        return None
    sniffed = magic.from_buffer(bytes(data[:SNIFF_BYTES]), mime=True)
    return None if not sniffed or sniffed in _UNDETECTED else sniffed


def guess_content_type(filename: str, declared: Optional[str] = None, data: bytes = b"") -> str:
    """Content type for an upload.

    The file bytes win, then the filename extension, then the type the client
    declared.
    """
    guessed, _ = mimetypes.guess_type(filename)
    return sniff_content_type(data) or guessed or declared or DEFAULT_CONTENT_TYPE


def quote_key(key: str) -> str:
    return quote(key, safe="")


class StorageBackend(ABC):
    """Object storage used for asset binaries.

    ``put`` returns the durable retrieval URL of the stored object. ``delete``
    returns False when the backend reports the object absent and raises
    StorageDeleteError on any other failure.
    """

    name: str = "base"

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    def url_for(self, key: str) -> str:
        ...

    async def close(self) -> None:
        return None


__all__ = [
    "StorageBackend",
    "StorageError",
    "StorageWriteError",
    "StorageDeleteError",
    "guess_content_type",
    "sniff_content_type",
    "quote_key",
]
