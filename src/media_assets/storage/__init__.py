from .add import add_storage, easy_storage
from .base import StorageBackend, guess_content_type
from .keys import KeyGenerator, key_from_url

__all__ = [
    "StorageBackend",
    "KeyGenerator",
    "add_storage",
    "easy_storage",
    "guess_content_type",
    "key_from_url",
]
