from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..dependencies import RecordsDep

router = APIRouter(tags=["internal"])


@router.get("/_health", include_in_schema=False)
async def health(records: RecordsDep):
    if await records.ping():
        return JSONResponse(status_code=200, content={"status": "ok"})
    return JSONResponse(status_code=503, content={"status": "unavailable"})
