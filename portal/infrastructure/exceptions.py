"""Object storage errors.

All of them are PortalExceptions, so the API's exception handlers turn them
into JSON error bodies via their code.
"""

from portal.domain.exceptions import PortalException


class StorageException(PortalException):
    """Base for anything a storage backend raises."""


class StorageNotFoundError(StorageException):
    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"No stored object at {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StoragePermissionError(StorageException):
    """The reference escapes the storage root or the backend denied access."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Storage refused {operation} for {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class StorageOperationError(StorageException):
    """The backend failed while doing ``verb``; ``reason`` is its own message."""

    verb = "access"
    error_code = "STORAGE_ERROR"

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Could not {self.verb} {file_path}",
            self.error_code,
            {"file_path": file_path, "reason": reason},
        )


class StorageUploadError(StorageOperationError):
    verb = "upload"
    error_code = "STORAGE_UPLOAD_ERROR"


class StorageDownloadError(StorageOperationError):
    verb = "download"
    error_code = "STORAGE_DOWNLOAD_ERROR"


class StorageDeleteError(StorageOperationError):
    verb = "delete"
    error_code = "STORAGE_DELETE_ERROR"
