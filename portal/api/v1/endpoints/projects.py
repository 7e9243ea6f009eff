"""Project API: brief submission, listings, admin workflow edits and project files."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile

from portal.api.v1.dependencies import (
    AdminActor,
    CurrentActor,
    get_file_service,
    get_project_service,
)
from portal.application.dtos.file import FileUpload
from portal.application.dtos.project import BriefSubmission, ProjectListFilter
from portal.application.use_cases.files import FileService
from portal.application.use_cases.projects import ProjectService
from portal.core.limiter import limit_upload, limit_writes
from portal.domain.enums import FileType, ProjectStatus
from portal.domain.exceptions import ValidationException
from portal.domain.lifecycle import AdminChanges
from portal.schemas.file import FileResponse
from portal.schemas.project import (
    BriefSubmissionRequest,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectUpdateRequest,
    ProjectUpdateResponse,
)

router = APIRouter()

ProjectSvc = Annotated[ProjectService, Depends(get_project_service)]
FileSvc = Annotated[FileService, Depends(get_file_service)]


@router.post("", response_model=ProjectResponse, status_code=201)
@limit_writes
async def submit_brief(
    request: Request,
    body: BriefSubmissionRequest,
    actor: CurrentActor,
    projects: ProjectSvc,
):
    """Create a project for the caller from the brief form."""
    view = await projects.submit_brief(
        actor,
        BriefSubmission(
            company=body.company,
            service_ids=tuple(body.service_ids),
            brief=body.brief.to_brief(),
        ),
    )
    return ProjectResponse.from_view(view)


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    actor: CurrentActor,
    projects: ProjectSvc,
    status: ProjectStatus | None = Query(None),
    search: str | None = Query(None, max_length=200, description="Title or client name (admin)"),
):
    """Admins see every project; everyone else sees their own."""
    views = await projects.list_projects(
        actor, ProjectListFilter(status=status, search=search)
    )
    return [ProjectResponse.from_view(v) for v in views]


@router.get("/stats", response_model=ProjectStatsResponse)
async def project_stats(actor: AdminActor, projects: ProjectSvc):
    return ProjectStatsResponse.from_stats(await projects.stats(actor))


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, actor: CurrentActor, projects: ProjectSvc):
    return ProjectResponse.from_view(await projects.get_project(actor, project_id))


@router.patch("/{project_id}", response_model=ProjectUpdateResponse)
@limit_writes
async def update_project(
    request: Request,
    project_id: str,
    body: ProjectUpdateRequest,
    actor: AdminActor,
    projects: ProjectSvc,
):
    """Change status, stage or deposit flag. Regressions come back as warnings."""
    result = await projects.update_project(
        actor,
        project_id,
        AdminChanges(
            status=body.status,
            current_stage=body.current_stage,
            deposit_paid=body.deposit_paid,
        ),
    )
    return ProjectUpdateResponse(
        project=ProjectResponse.from_view(result.view), warnings=list(result.warnings)
    )


@router.delete("/{project_id}", status_code=204)
@limit_writes
async def delete_project(
    request: Request, project_id: str, actor: AdminActor, projects: ProjectSvc
) -> Response:
    """Delete the project, its file rows and stored objects."""
    await projects.delete_project(actor, project_id)
    return Response(status_code=204)


@router.get("/{project_id}/files", response_model=list[FileResponse])
async def list_project_files(project_id: str, actor: CurrentActor, files: FileSvc):
    return [
        FileResponse.model_validate(f)
        for f in await files.list_project_files(actor, project_id)
    ]


@router.post("/{project_id}/files", response_model=FileResponse, status_code=201)
@limit_upload
async def upload_project_file(
    request: Request,
    project_id: str,
    actor: AdminActor,
    files: FileSvc,
    file: UploadFile = File(...),
    type: FileType = Form(..., description="concept or final"),
):
    """Upload a deliverable (multipart: file + type)."""
    if not file.filename:
        raise ValidationException("Filename required", field="file")
    content = await file.read()
    created = await files.upload(
        actor,
        FileUpload(
            project_id=project_id,
            file_name=file.filename,
            content=content,
            content_type=file.content_type or "application/octet-stream",
            type=type,
        ),
    )
    return FileResponse.model_validate(created)
