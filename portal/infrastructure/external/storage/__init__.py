"""Object storage for project deliverables (local filesystem or S3-compatible)."""

from portal.infrastructure.external.storage.factory import StorageFactory, get_storage
from portal.infrastructure.external.storage.local_storage import LocalStorageService
from portal.infrastructure.external.storage.protocol import StorageProtocol

__all__ = ["LocalStorageService", "StorageFactory", "StorageProtocol", "get_storage"]
