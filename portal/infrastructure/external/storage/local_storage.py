"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from urllib.parse import quote

import aiofiles
import aiofiles.os

from portal.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from portal.shared.utils.datetime import utc_now


class LocalStorageService:
    """Deliverables on local disk under storage_root.

    Paths are validated against storage_root. Writes go to a temp file in the
    target directory and are renamed into place. A .meta.json sidecar keeps
    content type, checksum and custom metadata.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve under storage_root; raises StoragePermissionError on traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(storage_ref, "path_validation")
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_suffix(file_path.suffix + ".meta.json")

    async def _write_metadata(self, file_path: Path, metadata: dict[str, Any]) -> None:
        meta_path = self._meta_path(file_path)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps(metadata, indent=2))
        os.chmod(meta_path, 0o640)

    async def upload(
        self,
        file_data: bytes,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write the object atomically. An existing object under the same ref is replaced."""
        target_path = self._get_full_path(storage_ref)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            checksum = hashlib.sha256(file_data).hexdigest()
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(file_data)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
            uploaded_at = utc_now().isoformat()
            await self._write_metadata(
                target_path,
                {
                    "storage_ref": storage_ref,
                    "checksum": checksum,
                    "size": len(file_data),
                    "content_type": content_type,
                    "uploaded_at": uploaded_at,
                    "custom": metadata or {},
                },
            )
        except OSError as e:
            raise StorageUploadError(storage_ref, str(e)) from e
        return {
            "storage_ref": storage_ref,
            "checksum": checksum,
            "size": len(file_data),
            "uploaded_at": uploaded_at,
        }

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    chunk = await f.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk
        except OSError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete object and sidecar, then prune empty parent directories."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except OSError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e
        parent = file_path.parent
        while parent != self.storage_root:
            try:
                parent.rmdir()
            except OSError:
                break
            parent = parent.parent
        return True

    async def exists(self, storage_ref: str) -> bool:
        try:
            return self._get_full_path(storage_ref).is_file()
        except StoragePermissionError:
            return False

    def public_url(self, storage_ref: str) -> str:
        path = f"/storage/{quote(storage_ref)}"
        return f"{self.base_url}{path}" if self.base_url else path
