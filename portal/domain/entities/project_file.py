"""Project file domain entity (a deliverable attached to a project)."""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.enums import FileType
from portal.domain.exceptions import ValidationException


@dataclass(frozen=True)
class ProjectFile:
    """Deliverable file row. seq is the insertion order used to break timestamp ties."""

    id: str
    seq: int
    project_id: str
    file_name: str
    file_url: str
    type: FileType
    uploaded_at: datetime
    storage_ref: str | None = None
    uploaded_by: str | None = None

    def __post_init__(self) -> None:
        if not self.file_name:
            raise ValidationException("File name is required", field="file_name")
        if not isinstance(self.type, FileType):
            raise ValidationException(
                f"File type must be one of: {', '.join(FileType.values())}",
                field="type",
            )
