"""Storage service factory: creates local or S3 backend from settings."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from portal.infrastructure.external.storage.protocol import StorageProtocol

if TYPE_CHECKING:
    from portal.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: Settings | None = None) -> StorageProtocol:
        """Create the configured backend.

        Raises:
            ValueError: Unknown backend, missing config, or boto3 not installed.
        """
        from portal.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()

        if backend == "local":
            from portal.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            return LocalStorageService(
                storage_root=s.storage_root,
                base_url=s.storage_base_url,
            )
        if backend == "s3":
            if not s.s3_bucket:
                raise ValueError("S3_BUCKET required for s3 backend")
            try:
                from portal.infrastructure.external.storage.s3_storage import (
                    S3StorageService,
                )
            except ImportError as e:
                raise ValueError(
                    "S3 backend requires boto3. Install with: pip install 'agency-portal[storage]'"
                ) from e
            return S3StorageService(
                bucket=s.s3_bucket,
                region=s.s3_region,
                endpoint_url=s.s3_endpoint_url,
                access_key=s.s3_access_key,
                secret_key=s.s3_secret_key.get_secret_value() if s.s3_secret_key else None,
            )
        raise ValueError(f"Unknown storage backend: {backend}. Supported: 'local', 's3'")


@lru_cache
def get_storage() -> StorageProtocol:
    """Process-wide storage backend built from settings."""
    return StorageFactory.create_storage_service()
