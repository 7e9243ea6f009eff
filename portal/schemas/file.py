"""Project file API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from portal.domain.enums import FileType


class FileResponse(BaseModel):
    """A listed file. project_title and client_name are filled for admins only."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    file_name: str
    file_url: str
    type: FileType
    uploaded_at: datetime
    project_title: str | None = None
    client_name: str | None = None
