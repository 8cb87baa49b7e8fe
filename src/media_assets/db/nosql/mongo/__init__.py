from .add import add_mongo
from .client import MongoHandle

__all__ = ["MongoHandle", "add_mongo"]
