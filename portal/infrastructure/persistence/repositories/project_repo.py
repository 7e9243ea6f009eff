"""Project repository (IProjectRepository).

Every read outer-joins the owning profile so entities carry client_name.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.dtos.project import ProjectListFilter, ProjectSummary
from portal.domain.entities import CreativeBrief, ProjectEntity, ServiceLine
from portal.domain.enums import ProjectStatus
from portal.infrastructure.persistence.models.profile import ProfileRecord
from portal.infrastructure.persistence.models.project import ProjectRecord
from portal.infrastructure.persistence.repositories.base import BaseRepository, remote_operation
from portal.shared.utils.datetime import ensure_utc


def project_to_entity(record: ProjectRecord, client_name: str | None = None) -> ProjectEntity:
    """Map ORM ProjectRecord to the domain ProjectEntity."""
    return ProjectEntity(
        id=record.id,
        client_id=record.client_id,
        title=record.title,
        services_selected=tuple(
            ServiceLine.from_dict(line) for line in record.services_selected or []
        ),
        total_price=record.total_price,
        status=ProjectStatus(record.status),
        current_stage=record.current_stage,
        deposit_paid=record.deposit_paid,
        brief=CreativeBrief.from_dict(record.brief),
        created_at=ensure_utc(record.created_at),
        updated_at=ensure_utc(record.updated_at),
        client_name=client_name,
    )


def _with_client() -> Select[Any]:
    return select(ProjectRecord, ProfileRecord.full_name).outerjoin(
        ProfileRecord, ProfileRecord.id == ProjectRecord.client_id
    )


class ProjectRepository(BaseRepository[ProjectRecord]):
    """Projects table access."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ProjectRecord)

    async def _fetch(self, stmt: Select[Any]) -> list[ProjectEntity]:
        result = await self.db.execute(stmt)
        return [project_to_entity(row[0], row[1]) for row in result.all()]

    @remote_operation("project insert")
    async def create_project(self, project: ProjectEntity) -> ProjectEntity:
        record = await self.add(
            ProjectRecord(
                client_id=project.client_id,
                title=project.title,
                services_selected=[line.to_dict() for line in project.services_selected],
                total_price=project.total_price,
                status=project.status.value,
                current_stage=project.current_stage,
                deposit_paid=project.deposit_paid,
                brief=project.brief.to_dict() if project.brief else None,
            )
        )
        return project_to_entity(record, project.client_name)

    @remote_operation("project lookup")
    async def get_by_id(self, project_id: str) -> ProjectEntity | None:
        rows = await self._fetch(_with_client().where(ProjectRecord.id == project_id))
        return rows[0] if rows else None

    @remote_operation("project update")
    async def save(self, project: ProjectEntity) -> ProjectEntity:
        """Write the admin-editable columns of an existing project."""
        record = await self.get_record(project.id or "")
        if record is None:
            raise ValueError(f"Project {project.id} does not exist")
        record.status = project.status.value
        record.current_stage = project.current_stage
        record.deposit_paid = project.deposit_paid
        await self.db.flush()
        await self.db.refresh(record)
        return project_to_entity(record, project.client_name)

    @remote_operation("project listing")
    async def list_for_client(self, client_id: str) -> list[ProjectEntity]:
        return await self._fetch(
            _with_client()
            .where(ProjectRecord.client_id == client_id)
            .order_by(ProjectRecord.updated_at.desc())
        )

    @remote_operation("project listing")
    async def list_all(self, filters: ProjectListFilter) -> list[ProjectEntity]:
        stmt = _with_client().order_by(ProjectRecord.created_at.desc())
        if filters.status is not None:
            stmt = stmt.where(ProjectRecord.status == filters.status.value)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(
                or_(
                    ProjectRecord.title.ilike(pattern),
                    ProfileRecord.full_name.ilike(pattern),
                )
            )
        return await self._fetch(stmt)

    @remote_operation("recent projects")
    async def list_recent(self, limit: int) -> list[ProjectEntity]:
        return await self._fetch(
            _with_client().order_by(ProjectRecord.created_at.desc()).limit(limit)
        )

    @remote_operation("project counts")
    async def count_by_status(self) -> dict[str, int]:
        result = await self.db.execute(
            select(ProjectRecord.status, func.count()).group_by(ProjectRecord.status)
        )
        counts = {status: 0 for status in ProjectStatus.values()}
        for status, count in result.all():
            counts[status] = int(count)
        return counts

    @remote_operation("project lookup")
    async def get_summary(self, project_id: str) -> ProjectSummary | None:
        result = await self.db.execute(
            select(
                ProjectRecord.id,
                ProjectRecord.client_id,
                ProjectRecord.title,
                ProfileRecord.full_name,
                ProjectRecord.updated_at,
            )
            .outerjoin(ProfileRecord, ProfileRecord.id == ProjectRecord.client_id)
            .where(ProjectRecord.id == project_id)
        )
        row = result.first()
        if row is None:
            return None
        return ProjectSummary(
            id=row.id,
            client_id=row.client_id,
            title=row.title,
            client_name=row.full_name,
            updated_at=ensure_utc(row.updated_at),
        )

    @remote_operation("project delete")
    async def delete_project(self, project_id: str) -> bool:
        result = await self.db.execute(
            delete(ProjectRecord).where(ProjectRecord.id == project_id)
        )
        await self.db.flush()
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]
