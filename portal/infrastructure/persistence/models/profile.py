"""Profile ORM model. Primary key is the account id."""

from sqlalchemy import ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import TimestampMixin


class ProfileRecord(TimestampMixin, Base):
    """Table: profile. role is free text; the domain maps unknown values to unassigned."""

    __tablename__ = "profile"

    id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), primary_key=True
    )
    full_name: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str | None] = mapped_column(
        String, nullable=True, server_default=text("'client'"), index=True
    )
    company: Mapped[str | None] = mapped_column(String, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True)
