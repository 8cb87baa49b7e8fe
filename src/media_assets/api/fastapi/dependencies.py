from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from media_assets.assets.service import AssetService
from media_assets.db.nosql.repository import AssetRecordStore


def get_records(request: Request) -> AssetRecordStore:
    return request.app.state.records


def get_asset_service(request: Request) -> AssetService:
    """Process-scoped AssetService, built on first use from app.state."""
    state = request.app.state
    service = getattr(state, "assets", None)
    if service is None:
        service = AssetService.from_settings(state.settings, state.storage, state.records, state.keys)
        state.assets = service
    return service


RecordsDep = Annotated[AssetRecordStore, Depends(get_records)]
AssetServiceDep = Annotated[AssetService, Depends(get_asset_service)]
