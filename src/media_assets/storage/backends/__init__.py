from .memory import MemoryBackend
from .s3 import S3Backend

__all__ = ["MemoryBackend", "S3Backend"]
