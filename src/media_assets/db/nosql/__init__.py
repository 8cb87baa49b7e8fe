from .repository import AssetRecordStore, MongoAssetRepository

__all__ = ["AssetRecordStore", "MongoAssetRepository"]
