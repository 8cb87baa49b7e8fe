"""Asset record models.

Field aliases keep the JSON and BSON shape ``{_id, filename, fileUrl,
uploadedAt}`` while Python code uses snake_case attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow_ms() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class NewAssetRecord(BaseModel):
    """Candidate record built by the upload pipeline, not yet persisted."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., description="Display name")
    file_url: str = Field(..., alias="fileUrl", description="Retrieval URL of the stored object")
    uploaded_at: datetime = Field(default_factory=utcnow_ms, alias="uploadedAt")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AssetRecord(BaseModel):
    """Persisted asset metadata."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Record id")
    filename: str = Field(..., description="Display name")
    file_url: str = Field(..., alias="fileUrl", description="Retrieval URL of the stored object")
    uploaded_at: datetime = Field(..., alias="uploadedAt", description="Upload timestamp (UTC)")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @field_validator("uploaded_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "AssetRecord":
        return cls.model_validate(doc)


class UploadResponse(BaseModel):
    message: str = "Files uploaded successfully!"
    files: list[AssetRecord]


class MessageResponse(BaseModel):
    message: str


@dataclass(frozen=True)
class IncomingFile:
    """One file of an upload batch, already read into memory."""

    filename: str
    content_type: str
    data: bytes
