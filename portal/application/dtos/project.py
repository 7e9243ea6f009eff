"""DTOs for project use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from portal.domain.entities import CreativeBrief, ProjectEntity, ServiceLine
from portal.domain.enums import ProjectStatus


@dataclass(frozen=True)
class BriefSubmission:
    """Creative brief form as submitted by a client.

    company becomes the project title; service_ids pick catalog entries.
    """

    company: str
    service_ids: tuple[str, ...]
    brief: CreativeBrief = field(default_factory=CreativeBrief)


@dataclass(frozen=True)
class ProjectListFilter:
    """Admin list filters. status None means all statuses."""

    status: ProjectStatus | None = None
    search: str | None = None


@dataclass(frozen=True)
class ProjectView:
    """Project read-model with derived workflow figures."""

    project: ProjectEntity
    progress_percent: int
    deposit_amount: int
    stage_label: str


@dataclass(frozen=True)
class ProjectUpdateResult:
    """Admin update outcome: the saved view and any regression warnings."""

    view: ProjectView
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectStats:
    """Admin overview figures."""

    total_projects: int
    by_status: dict[str, int]
    total_clients: int
    recent: list[ProjectEntity]


@dataclass(frozen=True)
class Quote:
    """Priced selection from the service catalog."""

    lines: tuple[ServiceLine, ...]
    total: Decimal
    deposit: int
    currency: str


@dataclass(frozen=True)
class ProjectSummary:
    """Minimal project fields needed to scope and label files."""

    id: str
    client_id: str
    title: str
    client_name: str | None = None
    updated_at: datetime | None = None
