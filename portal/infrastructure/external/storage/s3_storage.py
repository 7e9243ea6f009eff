"""S3-compatible object storage (AWS S3, MinIO, etc.)."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import boto3
from botocore.exceptions import ClientError

from portal.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)

_MISSING = {"404", "NoSuchKey", "NotFound"}


def _error_code(e: ClientError) -> str:
    return str(e.response.get("Error", {}).get("Code", ""))


class S3StorageService:
    """S3-compatible storage with server-side encryption.

    boto3 is synchronous; every call runs in asyncio.to_thread.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    async def upload(
        self,
        file_data: bytes,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        checksum = hashlib.sha256(file_data).hexdigest()
        meta = {"sha256": checksum, "original-size": str(len(file_data))}
        for k, v in (metadata or {}).items():
            meta[k.lower().replace("_", "-")] = v

        def _put() -> str:
            self._client.put_object(
                Bucket=self.bucket,
                Key=storage_ref,
                Body=file_data,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                Metadata=meta,
            )
            head = self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            return head["LastModified"].isoformat()

        try:
            uploaded_at = await asyncio.to_thread(_put)
        except ClientError as e:
            raise StorageUploadError(storage_ref, str(e)) from e
        return {
            "storage_ref": storage_ref,
            "checksum": checksum,
            "size": len(file_data),
            "uploaded_at": uploaded_at,
        }

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream the object body chunk by chunk."""

        def _open() -> Any:
            return self._client.get_object(Bucket=self.bucket, Key=storage_ref)["Body"]

        try:
            body = await asyncio.to_thread(_open)
        except ClientError as e:
            if _error_code(e) in _MISSING:
                raise StorageNotFoundError(storage_ref) from e
            raise StorageDownloadError(storage_ref, str(e)) from e
        try:
            while True:
                chunk = await asyncio.to_thread(body.read, self.CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        finally:
            body.close()

    async def delete(self, storage_ref: str) -> bool:
        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
            except ClientError as e:
                if _error_code(e) in _MISSING:
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=storage_ref)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except ClientError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        def _exists() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=storage_ref)
                return True
            except ClientError:
                return False

        return await asyncio.to_thread(_exists)

    def public_url(self, storage_ref: str) -> str:
        key = quote(storage_ref)
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
