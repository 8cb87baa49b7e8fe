from . import app

# Base exception
from .exceptions import AssetManagerError

__all__ = [
    "app",
    "AssetManagerError",
]

__version__ = "0.1.0"
