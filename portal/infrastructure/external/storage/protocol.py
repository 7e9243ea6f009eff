"""Storage service protocol (DIP). Implementations: LocalStorageService, S3StorageService."""

from collections.abc import AsyncIterator
from typing import Any, Protocol


class StorageProtocol(Protocol):
    """Object storage backend for project deliverables."""

    async def upload(
        self,
        file_data: bytes,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes; returns storage_ref, checksum (sha256), size, uploaded_at."""
        ...

    def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream object content in chunks."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        ...

    def public_url(self, storage_ref: str) -> str:
        """URL stored on the file row for the object."""
        ...
