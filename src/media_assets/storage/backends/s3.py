from __future__ import annotations

import logging
from typing import Any, Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from media_assets.exceptions import StorageDeleteError, StorageWriteError

from ..base import StorageBackend, quote_key

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3Backend(StorageBackend):
    """S3 (or S3-compatible) object storage via aioboto3.

    A client is opened per operation from one long-lived session; there is no
    retry beyond botocore's own transport handling.
    """

    name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        *,
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        public_base_url: Optional[str] = None,
        session: Optional[aioboto3.Session] = None,
    ):
        if not bucket:
            raise ValueError("S3Backend requires a bucket name")
        self.bucket = bucket
        self.region = region
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._access_key = access_key
        self._secret_key = secret_key
        self._session = session or aioboto3.Session()

    def _client(self) -> Any:
        return self._session.client(
            "s3",
            region_name=self.region,
            endpoint_url=self.endpoint,
            aws_access_key_id=self._access_key,
            aws_secret_access_key=self._secret_key,
        )

    def url_for(self, key: str) -> str:
        quoted = quote_key(key)
        if self.public_base_url:
            return f"{self.public_base_url}/{quoted}"
        if self.endpoint:
            return f"{self.endpoint}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            async with self._client() as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                )
        except (ClientError, BotoCoreError) as exc:
            raise StorageWriteError(f"Failed to write s3://{self.bucket}/{key}: {exc}", key=key) from exc
        logger.debug("Stored s3://%s/%s (%s, %d bytes)", self.bucket, key, content_type, len(data))
        return self.url_for(key)

    async def delete(self, key: str) -> bool:
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                return False
            raise StorageDeleteError(f"Failed to delete s3://{self.bucket}/{key}: {exc}", key=key) from exc
        except BotoCoreError as exc:
            raise StorageDeleteError(f"Failed to delete s3://{self.bucket}/{key}: {exc}", key=key) from exc
        return True
