"""Project file repository (IFileRepository)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.file import FileWithProject
from portal.application.dtos.project import ProjectSummary
from portal.domain.entities import ProjectFile
from portal.domain.enums import FileType
from portal.infrastructure.persistence.models.profile import ProfileRecord
from portal.infrastructure.persistence.models.project import (
    ProjectFileRecord,
    ProjectRecord,
)
from portal.infrastructure.persistence.repositories.base import BaseRepository, remote_operation
from portal.shared.utils.datetime import ensure_utc


def file_to_entity(record: ProjectFileRecord) -> ProjectFile:
    """Map ORM ProjectFileRecord to the domain ProjectFile."""
    return ProjectFile(
        id=record.id,
        seq=record.seq,
        project_id=record.project_id,
        file_name=record.file_name,
        file_url=record.file_url,
        type=FileType(record.type),
        uploaded_at=ensure_utc(record.uploaded_at),  # type: ignore[arg-type]
        storage_ref=record.storage_ref,
        uploaded_by=record.uploaded_by,
    )


def _joined() -> Select[Any]:
    return (
        select(
            ProjectFileRecord,
            ProjectRecord.client_id,
            ProjectRecord.title,
            ProjectRecord.updated_at,
            ProfileRecord.full_name,
        )
        .outerjoin(ProjectRecord, ProjectRecord.id == ProjectFileRecord.project_id)
        .outerjoin(ProfileRecord, ProfileRecord.id == ProjectRecord.client_id)
    )


def _row_to_item(row: Any) -> FileWithProject:
    record: ProjectFileRecord = row[0]
    project = None
    if row.client_id is not None:
        project = ProjectSummary(
            id=record.project_id,
            client_id=row.client_id,
            title=row.title,
            client_name=row.full_name,
            updated_at=ensure_utc(row.updated_at),
        )
    return FileWithProject(file=file_to_entity(record), project=project)


class FileRepository(BaseRepository[ProjectFileRecord]):
    """project_file table access, joined with the owning project where needed."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ProjectFileRecord)

    @remote_operation("file insert")
    async def create_file(
        self,
        project_id: str,
        file_name: str,
        file_url: str,
        file_type: FileType,
        storage_ref: str | None,
        uploaded_by: str | None,
    ) -> ProjectFile:
        record = await self.add(
            ProjectFileRecord(
                project_id=project_id,
                file_name=file_name,
                file_url=file_url,
                type=file_type.value,
                storage_ref=storage_ref,
                uploaded_by=uploaded_by,
            )
        )
        return file_to_entity(record)

    @remote_operation("file lookup")
    async def get_with_project(self, file_id: str) -> FileWithProject | None:
        result = await self.db.execute(_joined().where(ProjectFileRecord.id == file_id))
        row = result.first()
        return _row_to_item(row) if row is not None else None

    @remote_operation("file listing")
    async def list_with_projects(self, client_id: str | None = None) -> list[FileWithProject]:
        stmt = _joined().order_by(
            ProjectFileRecord.uploaded_at.desc(), ProjectFileRecord.seq.desc()
        )
        if client_id is not None:
            stmt = stmt.where(ProjectRecord.client_id == client_id)
        result = await self.db.execute(stmt)
        return [_row_to_item(row) for row in result.all()]

    @remote_operation("project file listing")
    async def list_for_project(self, project_id: str) -> list[ProjectFile]:
        result = await self.db.execute(
            select(ProjectFileRecord)
            .where(ProjectFileRecord.project_id == project_id)
            .order_by(ProjectFileRecord.uploaded_at.desc(), ProjectFileRecord.seq.desc())
        )
        return [file_to_entity(r) for r in result.scalars().all()]

    @remote_operation("file delete")
    async def delete_file(self, file_id: str) -> bool:
        result = await self.db.execute(
            delete(ProjectFileRecord).where(ProjectFileRecord.id == file_id)
        )
        await self.db.flush()
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]
