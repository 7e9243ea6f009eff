"""Project domain entity.

A client's engagement: the selected services, the quoted total and the
position in the five-stage delivery workflow. Validation runs on
construction, so every ProjectEntity in memory satisfies the workflow rules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from portal.core.constants import MAX_STAGE, MIN_STAGE
from portal.domain.enums import ProjectStatus
from portal.domain.exceptions import ValidationException


@dataclass(frozen=True)
class ServiceLine:
    """One selected catalog service as priced at submission time."""

    id: str
    title: str
    price: Decimal

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form stored in projects.services_selected."""
        return {"id": self.id, "title": self.title, "price": str(self.price)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceLine":
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            price=Decimal(str(data.get("price", "0"))),
        )


@dataclass(frozen=True)
class CreativeBrief:
    """Free-text answers of the creative brief form (all optional)."""

    industry: str | None = None
    description: str | None = None
    audience: str | None = None
    style: str | None = None
    references: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "industry": self.industry,
            "description": self.description,
            "audience": self.audience,
            "style": self.style,
            "references": self.references,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CreativeBrief | None":
        if not data:
            return None
        return cls(
            industry=data.get("industry"),
            description=data.get("description"),
            audience=data.get("audience"),
            style=data.get("style"),
            references=data.get("references"),
        )


@dataclass(frozen=True)
class ProjectEntity:
    """Domain entity for a project.

    Invariants: non-empty title, positive total, stage in [1, 5] and
    completed status only at stage 5.
    """

    id: str | None
    client_id: str
    title: str
    services_selected: tuple[ServiceLine, ...]
    total_price: Decimal
    status: ProjectStatus = ProjectStatus.ONBOARDING
    current_stage: int = MIN_STAGE
    deposit_paid: bool = False
    brief: CreativeBrief | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    client_name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate project rules. Raises ValidationException if invalid."""
        if not self.client_id:
            raise ValidationException("Project must belong to a client", field="client_id")
        if not self.title or not self.title.strip():
            raise ValidationException("Project title is required", field="title")
        if self.total_price <= 0:
            raise ValidationException("Total price must be positive", field="total_price")
        if not isinstance(self.status, ProjectStatus):
            raise ValidationException(
                f"Status must be one of: {', '.join(ProjectStatus.values())}",
                field="status",
            )
        if not MIN_STAGE <= self.current_stage <= MAX_STAGE:
            raise ValidationException(
                f"Stage must be between {MIN_STAGE} and {MAX_STAGE}",
                field="current_stage",
            )
        if self.status is ProjectStatus.COMPLETED and self.current_stage != MAX_STAGE:
            raise ValidationException(
                f"A completed project must be at stage {MAX_STAGE}",
                field="status",
            )

    def is_owned_by(self, identity_id: str) -> bool:
        """Return whether the given identity is this project's client."""
        return self.client_id == identity_id
