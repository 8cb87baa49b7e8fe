from __future__ import annotations

from dataclasses import dataclass

from ..base import StorageBackend, quote_key


@dataclass
class StoredObject:
    data: bytes
    content_type: str


class MemoryBackend(StorageBackend):
    """In-process object store for local development and tests.

    Objects live only as long as the process; nothing is shared between
    workers.
    """

    name = "memory"

    def __init__(self, base_url: str = "memory://"):
        self.base_url = base_url
        self.objects: dict[str, StoredObject] = {}

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        self.objects[key] = StoredObject(data=bytes(data), content_type=content_type)
        return self.url_for(key)

    async def delete(self, key: str) -> bool:
        return self.objects.pop(key, None) is not None

    def url_for(self, key: str) -> str:
        return f"{self.base_url}{quote_key(key)}"

    def clear(self) -> None:
        self.objects.clear()
