"""DTOs for project file use cases."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from portal.application.dtos.project import ProjectSummary
from portal.domain.entities import ProjectFile
from portal.domain.enums import FileType
from portal.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class FileWithProject:
    """A file row joined with its parent project (None when the project is gone)."""

    file: ProjectFile
    project: ProjectSummary | None


@dataclass(frozen=True)
class FileView:
    """File as listed to a caller. Project fields are filled for admins only."""

    id: str
    seq: int
    project_id: str
    file_name: str
    file_url: str
    type: FileType
    uploaded_at: datetime
    project_title: str | None = None
    client_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form (used for the view cache)."""
        return {
            "id": self.id,
            "seq": self.seq,
            "project_id": self.project_id,
            "file_name": self.file_name,
            "file_url": self.file_url,
            "type": self.type.value,
            "uploaded_at": self.uploaded_at.isoformat(),
            "project_title": self.project_title,
            "client_name": self.client_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileView":
        uploaded_at = ensure_utc(datetime.fromisoformat(data["uploaded_at"]))
        return cls(
            id=data["id"],
            seq=int(data["seq"]),
            project_id=data["project_id"],
            file_name=data["file_name"],
            file_url=data["file_url"],
            type=FileType(data["type"]),
            uploaded_at=uploaded_at,  # type: ignore[arg-type]
            project_title=data.get("project_title"),
            client_name=data.get("client_name"),
        )


@dataclass(frozen=True)
class FileUpload:
    """Upload request handed to FileService by the endpoint."""

    project_id: str
    file_name: str
    content: bytes
    content_type: str
    type: FileType


@dataclass(frozen=True)
class FileDownload:
    """Scoped download: file metadata and its content stream."""

    file: ProjectFile
    content_type: str
    stream: AsyncIterator[bytes]
