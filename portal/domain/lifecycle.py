"""Project lifecycle rules: draft creation, admin updates, progress and deposit.

Pure functions over ProjectEntity. Persistence and audit logging are the
caller's job; these only compute and validate.
"""

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from portal.core.constants import MAX_STAGE, MIN_STAGE
from portal.domain.entities.project import CreativeBrief, ProjectEntity, ServiceLine
from portal.domain.enums import ProjectStatus
from portal.domain.exceptions import ValidationException

DEFAULT_DEPOSIT_RATE = 0.30


@dataclass(frozen=True)
class AdminChanges:
    """Fields an admin may change on a project. None means unchanged."""

    status: ProjectStatus | str | None = None
    current_stage: int | None = None
    deposit_paid: bool | None = None

    def is_empty(self) -> bool:
        return self.status is None and self.current_stage is None and self.deposit_paid is None


@dataclass(frozen=True)
class LifecycleChange:
    """Result of an admin update: the new project and any regression warnings."""

    project: ProjectEntity
    warnings: tuple[str, ...] = ()


def create_draft(
    client_id: str,
    title: str,
    services: Iterable[ServiceLine],
    total_price: Decimal | int,
    brief: CreativeBrief | None = None,
) -> ProjectEntity:
    """Build a new project at the start of the workflow.

    Status onboarding, stage 1, deposit unpaid. Title is trimmed.

    Raises:
        ValidationException: Empty title or non-positive total.
    """
    clean_title = (title or "").strip()
    if not clean_title:
        raise ValidationException("Project title is required", field="title")
    total = Decimal(total_price)
    if total <= 0:
        raise ValidationException("Total price must be positive", field="total_price")
    return ProjectEntity(
        id=None,
        client_id=client_id,
        title=clean_title,
        services_selected=tuple(services),
        total_price=total,
        status=ProjectStatus.ONBOARDING,
        current_stage=MIN_STAGE,
        deposit_paid=False,
        brief=brief,
    )


def _coerce_status(value: ProjectStatus | str) -> ProjectStatus:
    if isinstance(value, ProjectStatus):
        return value
    try:
        return ProjectStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationException(
            f"Status must be one of: {', '.join(ProjectStatus.values())}",
            field="status",
        ) from None


def update_admin_fields(project: ProjectEntity, changes: AdminChanges) -> LifecycleChange:
    """Apply an admin's status/stage/deposit changes.

    Regressions (lower stage, earlier status) are allowed and reported as
    warnings. The combined result must still satisfy the project invariants.

    Raises:
        ValidationException: Stage outside [1, 5], unknown status, or a
            completed status at a stage other than 5.
    """
    status = project.status if changes.status is None else _coerce_status(changes.status)
    stage = project.current_stage if changes.current_stage is None else changes.current_stage
    if isinstance(stage, bool) or not isinstance(stage, int):
        raise ValidationException("Stage must be an integer", field="current_stage")
    if not MIN_STAGE <= stage <= MAX_STAGE:
        raise ValidationException(
            f"Stage must be between {MIN_STAGE} and {MAX_STAGE}",
            field="current_stage",
        )
    if status is ProjectStatus.COMPLETED and stage != MAX_STAGE:
        raise ValidationException(
            f"A completed project must be at stage {MAX_STAGE}",
            field="status",
        )

    warnings: list[str] = []
    if stage < project.current_stage:
        warnings.append(f"Stage moved back from {project.current_stage} to {stage}")
    if status.rank < project.status.rank:
        warnings.append(f"Status moved back from {project.status.value} to {status.value}")

    deposit_paid = project.deposit_paid if changes.deposit_paid is None else changes.deposit_paid
    updated = replace(
        project,
        status=status,
        current_stage=stage,
        deposit_paid=bool(deposit_paid),
    )
    return LifecycleChange(project=updated, warnings=tuple(warnings))


def progress_percent(project: ProjectEntity | int) -> int:
    """Delivery progress: stage 1..5 maps to 20, 40, 60, 80, 100."""
    stage = project if isinstance(project, int) else project.current_stage
    return stage * 100 // MAX_STAGE


def deposit_amount(
    project_or_total: ProjectEntity | Decimal | int | float,
    rate: float = DEFAULT_DEPOSIT_RATE,
) -> int:
    """Deposit due: total x rate rounded half-up to a whole currency unit.

    Args:
        project_or_total: A project or a bare total.
        rate: Deposit share of the total.

    Returns:
        Whole-unit deposit amount.
    """
    if isinstance(project_or_total, ProjectEntity):
        total = project_or_total.total_price
    else:
        total = Decimal(str(project_or_total))
    amount = (total * Decimal(str(rate))).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(amount)
