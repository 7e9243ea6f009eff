"""Project API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from portal.application.dtos.project import ProjectStats, ProjectView
from portal.core.constants import MAX_STAGE, MIN_STAGE
from portal.domain.entities import CreativeBrief
from portal.domain.enums import ProjectStatus
from portal.schemas.catalog import ServiceLineResponse


class BriefPayload(BaseModel):
    """Creative brief answers; every field is optional free text."""

    model_config = ConfigDict(from_attributes=True)

    industry: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    audience: str | None = Field(default=None, max_length=2000)
    style: str | None = Field(default=None, max_length=2000)
    references: str | None = Field(default=None, max_length=2000)

    def to_brief(self) -> CreativeBrief:
        return CreativeBrief(**self.model_dump())


class BriefSubmissionRequest(BaseModel):
    """POST /projects. company becomes the project title."""

    company: str = Field(..., min_length=1, max_length=200)
    service_ids: list[str] = Field(..., min_length=1, max_length=20)
    brief: BriefPayload = Field(default_factory=BriefPayload)


class ProjectUpdateRequest(BaseModel):
    """PATCH /projects/{id}. At least one field must be set."""

    status: ProjectStatus | None = None
    current_stage: int | None = Field(default=None, ge=MIN_STAGE, le=MAX_STAGE)
    deposit_paid: bool | None = None


class ProjectResponse(BaseModel):
    """Project with derived workflow figures."""

    id: str
    client_id: str
    client_name: str | None = None
    title: str
    services_selected: list[ServiceLineResponse]
    total_price: Decimal
    deposit_amount: int
    deposit_paid: bool
    status: ProjectStatus
    current_stage: int
    stage_label: str
    progress_percent: int
    brief: BriefPayload | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_view(cls, view: ProjectView) -> "ProjectResponse":
        p = view.project
        return cls(
            id=p.id or "",
            client_id=p.client_id,
            client_name=p.client_name,
            title=p.title,
            services_selected=[
                ServiceLineResponse.model_validate(line) for line in p.services_selected
            ],
            total_price=p.total_price,
            deposit_amount=view.deposit_amount,
            deposit_paid=p.deposit_paid,
            status=p.status,
            current_stage=p.current_stage,
            stage_label=view.stage_label,
            progress_percent=view.progress_percent,
            brief=BriefPayload.model_validate(p.brief) if p.brief else None,
            created_at=p.created_at,
            updated_at=p.updated_at,
        )


class ProjectUpdateResponse(BaseModel):
    """Saved project plus warnings for stage/status regressions."""

    project: ProjectResponse
    warnings: list[str] = Field(default_factory=list)


class ProjectSummaryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    client_name: str | None = None
    status: ProjectStatus
    created_at: datetime | None = None


class ProjectStatsResponse(BaseModel):
    total_projects: int
    by_status: dict[str, int]
    total_clients: int
    recent: list[ProjectSummaryItem]

    @classmethod
    def from_stats(cls, stats: ProjectStats) -> "ProjectStatsResponse":
        return cls(
            total_projects=stats.total_projects,
            by_status=stats.by_status,
            total_clients=stats.total_clients,
            recent=[ProjectSummaryItem.model_validate(p) for p in stats.recent],
        )
