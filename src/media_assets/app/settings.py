from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Service settings.

    Env support (case-insensitive, `.env` honoured):
      - PORT, HOST, BASE_URL for the HTTP server and the banner route
      - MONGO_URI, MONGO_DB, MONGO_COLLECTION for the record store
      - STORAGE_BACKEND plus the AWS_* variables for object storage
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["local", "dev", "test", "prod"] = Field(default="local")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = Field(default=None)
    log_format: Optional[Literal["plain", "json"]] = Field(default=None)

    # HTTP
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)
    base_url: str = Field(default="http://localhost:4000")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    max_upload_bytes: Optional[int] = Field(default=None, gt=0)

    # Record store
    mongo_uri: str = Field(default="mongodb://localhost:27017/media")
    mongo_db: Optional[str] = Field(default=None)
    mongo_collection: str = Field(default="files")
    mongo_server_selection_timeout_ms: int = Field(default=5000)

    # Object storage
    storage_backend: Literal["s3", "memory"] = Field(default="s3")
    aws_region: str = Field(default="us-east-1")
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)
    aws_bucket_name: Optional[str] = Field(default=None)
    aws_endpoint_url: Optional[str] = Field(default=None)  # MinIO / LocalStack
    storage_public_url: Optional[str] = Field(default=None)

    # Upload pipeline
    strict_filenames: bool = Field(default=False)
    rollback_on_failure: bool = Field(default=False)

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def resolved_log_level(self) -> str:
        if self.log_level:
            return self.log_level
        return "INFO" if self.is_prod else "DEBUG"

    @property
    def resolved_log_format(self) -> str:
        if self.log_format:
            return self.log_format
        return "json" if self.is_prod else "plain"


@lru_cache
def get_settings(**kwargs) -> AppSettings:
    # Only include kwargs that are not None, so defaults in AppSettings are used
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered)
