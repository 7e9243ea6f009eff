"""Project and project file ORM models."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Identity,
    Integer,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class ProjectRecord(CuidMixin, TimestampMixin, Base):
    """Table: project. Workflow rules are also enforced by check constraints."""

    __tablename__ = "project"

    client_id: Mapped[str] = mapped_column(
        String, ForeignKey("profile.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    services_selected: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    deposit_paid: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'onboarding'"), index=True
    )
    current_stage: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("1")
    )
    brief: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('onboarding', 'active', 'completed')", name="project_status_check"
        ),
        CheckConstraint(
            "current_stage BETWEEN 1 AND 5", name="project_stage_range_check"
        ),
        CheckConstraint("total_price > 0", name="project_total_positive_check"),
        CheckConstraint(
            "status <> 'completed' OR current_stage = 5",
            name="project_completed_stage_check",
        ),
    )


class ProjectFileRecord(CuidMixin, Base):
    """Table: project_file. seq is a database-assigned insertion counter."""

    __tablename__ = "project_file"

    seq: Mapped[int] = mapped_column(
        BigInteger, Identity(always=False), nullable=False, unique=True
    )
    project_id: Mapped[str] = mapped_column(
        String, ForeignKey("project.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    file_url: Mapped[str] = mapped_column(String, nullable=False)
    storage_ref: Mapped[str | None] = mapped_column(String, nullable=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    uploaded_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        CheckConstraint("type IN ('concept', 'final')", name="project_file_type_check"),
    )
