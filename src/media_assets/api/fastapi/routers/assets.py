from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from media_assets.assets.models import AssetRecord, IncomingFile, MessageResponse, UploadResponse
from media_assets.exceptions import (
    NotFoundError,
    PersistenceError,
    StorageError,
    UploadError,
    ValidationError,
)

from ..dependencies import AssetServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Assets"])


@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    service: AssetServiceDep,
    files: Annotated[Optional[list[UploadFile]], File()] = None,
) -> UploadResponse:
    """Store every file of the multipart ``files`` field and record it.

    Example:
        ```bash
        curl -X POST http://localhost:4000/upload \\
          -F "files=@photo-abc-123.jpg" -F "files=@scan-def-456.pdf"
        ```
    """
    if not files:
        raise HTTPException(status_code=400, detail="File upload failed")

    batch = [
        IncomingFile(
            filename=f.filename or "",
            content_type=f.content_type or "",
            data=await f.read(),
        )
        for f in files
    ]
    try:
        saved = await service.create(batch)
    except ValidationError as exc:
        logger.info("Rejected upload batch of %d files: %s", len(batch), exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except (UploadError, PersistenceError):
        logger.exception("Error saving file metadata", extra={"batch_size": len(batch)})
        raise HTTPException(status_code=500, detail="Error saving file metadata")
    return UploadResponse(files=saved)


@router.get("/files", response_model=list[AssetRecord])
async def list_files(service: AssetServiceDep) -> list[AssetRecord]:
    try:
        return await service.list()
    except PersistenceError:
        logger.exception("Error fetching files")
        raise HTTPException(status_code=500, detail="Error fetching files")


@router.delete("/files/{file_id}", response_model=MessageResponse)
async def delete_file(file_id: str, service: AssetServiceDep) -> MessageResponse:
    """Remove the stored object, then its record.

    Example:
        ```bash
        curl -X DELETE http://localhost:4000/files/6650c2f4e13b5c0a8f1d2e3a
        ```
    """
    try:
        await service.delete(file_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="File not found")
    except (StorageError, PersistenceError):
        logger.exception("Error deleting file", extra={"asset_id": file_id})
        raise HTTPException(status_code=500, detail="Error deleting file")
    return MessageResponse(message="File deleted successfully")
