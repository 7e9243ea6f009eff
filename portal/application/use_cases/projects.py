"""Project use cases: brief submission, scoped reads, admin workflow updates.

Every read is scoped: clients only ever see their own projects, and a project
they cannot see is reported as not found rather than forbidden.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial

from portal.application.dtos.project import (
    BriefSubmission,
    ProjectListFilter,
    ProjectStats,
    ProjectUpdateResult,
    ProjectView,
)
from portal.application.dtos.session import Actor
from portal.application.interfaces.repositories import (
    IFileRepository,
    IProfileRepository,
    IProjectRepository,
)
from portal.application.interfaces.services import IStorageService
from portal.application.services.file_access_scope import FileAccessScope
from portal.application.use_cases.catalog import CatalogService
from portal.core.constants import RECENT_PROJECTS_LIMIT, STAGE_LABELS
from portal.domain.entities import CreativeBrief, ProjectEntity
from portal.domain.enums import ProjectStatus, Role
from portal.domain.exceptions import (
    AuthorizationException,
    PortalException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.domain.lifecycle import (
    AdminChanges,
    create_draft,
    deposit_amount,
    progress_percent,
    update_admin_fields,
)
from portal.shared.telemetry.tracing import traced
from portal.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


def _clean_brief(brief: CreativeBrief) -> CreativeBrief:
    return CreativeBrief(
        industry=InputSanitizer.sanitize_text(brief.industry),
        description=InputSanitizer.sanitize_text(brief.description),
        audience=InputSanitizer.sanitize_text(brief.audience),
        style=InputSanitizer.sanitize_text(brief.style),
        references=InputSanitizer.sanitize_text(brief.references),
    )


class ProjectService:
    """Project workflows for clients and admins."""

    def __init__(
        self,
        projects: IProjectRepository,
        profiles: IProfileRepository,
        files: IFileRepository,
        storage: IStorageService,
        file_scope: FileAccessScope,
        catalog: CatalogService,
    ) -> None:
        self.projects = projects
        self.profiles = profiles
        self.files = files
        self.storage = storage
        self.file_scope = file_scope
        self.catalog = catalog

    def to_view(self, project: ProjectEntity) -> ProjectView:
        """Attach progress, deposit and stage label."""
        return ProjectView(
            project=project,
            progress_percent=progress_percent(project),
            deposit_amount=deposit_amount(project, self.catalog.deposit_rate),
            stage_label=STAGE_LABELS[project.current_stage - 1],
        )

    @traced("projects.submit_brief")
    async def submit_brief(self, actor: Actor, submission: BriefSubmission) -> ProjectView:
        """Create a project from the brief form; the total is priced server-side."""
        quote = self.catalog.quote(submission.service_ids)
        title = InputSanitizer.sanitize_text(submission.company) or ""
        draft = create_draft(
            client_id=actor.id,
            title=title,
            services=quote.lines,
            total_price=quote.total,
            brief=_clean_brief(submission.brief),
        )
        saved = await self.projects.create_project(draft)
        logger.info(
            "Project %s submitted by %s (total %s %s)",
            saved.id,
            actor.id,
            saved.total_price,
            self.catalog.currency,
        )
        return self.to_view(saved)

    async def list_projects(
        self, actor: Actor, filters: ProjectListFilter | None = None
    ) -> list[ProjectView]:
        """Admins: all projects, newest first, filtered. Others: own projects, latest update first."""
        filters = filters or ProjectListFilter()
        if actor.is_admin:
            projects = await self.projects.list_all(filters)
        else:
            projects = await self.projects.list_for_client(actor.id)
            if filters.status is not None:
                projects = [p for p in projects if p.status is filters.status]
        return [self.to_view(p) for p in projects]

    async def _get_visible(self, actor: Actor, project_id: str) -> ProjectEntity:
        project = await self.projects.get_by_id(project_id)
        if project is None or not (actor.is_admin or project.is_owned_by(actor.id)):
            raise ResourceNotFoundException("project", project_id)
        return project

    async def get_project(self, actor: Actor, project_id: str) -> ProjectView:
        return self.to_view(await self._get_visible(actor, project_id))

    @traced("projects.update")
    async def update_project(
        self, actor: Actor, project_id: str, changes: AdminChanges
    ) -> ProjectUpdateResult:
        """Admin edit of status, stage and deposit flag.

        Regressions are saved but returned as warnings and written to the
        log for audit.
        """
        if not actor.is_admin:
            raise AuthorizationException(resource="project", action="update")
        if changes.is_empty():
            raise ValidationException("No project fields supplied")
        project = await self.projects.get_by_id(project_id)
        if project is None:
            raise ResourceNotFoundException("project", project_id)
        change = update_admin_fields(project, changes)
        for warning in change.warnings:
            logger.warning("Project %s: %s (admin %s)", project_id, warning, actor.id)
        saved = await self.projects.save(change.project)
        saved = replace(saved, client_name=saved.client_name or project.client_name)
        logger.info(
            "Project %s updated by %s: status=%s stage=%s deposit_paid=%s",
            project_id,
            actor.id,
            saved.status.value,
            saved.current_stage,
            saved.deposit_paid,
        )
        return ProjectUpdateResult(view=self.to_view(saved), warnings=change.warnings)

    @traced("projects.delete")
    async def delete_project(self, actor: Actor, project_id: str) -> None:
        """Admin-only: delete the project row (file rows cascade).

        Stored objects are removed only after the delete commits; a failed
        commit leaves every row pointing at an object that still exists.
        """
        if not actor.is_admin:
            raise AuthorizationException(resource="project", action="delete")
        files = await self.files.list_for_project(project_id)
        if not await self.projects.delete_project(project_id):
            raise ResourceNotFoundException("project", project_id)
        refs = [f.storage_ref for f in files if f.storage_ref]
        if refs:
            await self.file_scope.on_commit(partial(self._remove_objects, project_id, refs))
        await self.file_scope.on_commit(self.file_scope.invalidate)
        logger.info(
            "Project %s deleted by %s with %d file(s)", project_id, actor.id, len(files)
        )

    async def _remove_objects(self, project_id: str, refs: list[str]) -> None:
        for ref in refs:
            try:
                await self.storage.delete(ref)
            except PortalException as e:
                logger.warning(
                    "Stored object %s of deleted project %s not removed: %s",
                    ref,
                    project_id,
                    e.message,
                )

    async def stats(self, actor: Actor) -> ProjectStats:
        """Admin overview: counts per status, client count and recent projects."""
        if not actor.is_admin:
            raise AuthorizationException(resource="project", action="stats")
        by_status = await self.projects.count_by_status()
        counts = {status: by_status.get(status, 0) for status in ProjectStatus.values()}
        return ProjectStats(
            total_projects=sum(counts.values()),
            by_status=counts,
            total_clients=await self.profiles.count_by_role(Role.CLIENT),
            recent=await self.projects.list_recent(RECENT_PROJECTS_LIMIT),
        )
