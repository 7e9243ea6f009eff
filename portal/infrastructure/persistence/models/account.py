"""Identity ORM models: accounts, browser sessions and password reset tokens."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from portal.infrastructure.persistence.database import Base
from portal.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Account(CuidMixin, TimestampMixin, Base):
    """Sign-in credentials. Email is stored lower-cased and unique."""

    __tablename__ = "account"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )


class AuthSessionRecord(CuidMixin, Base):
    """One signed-in browser session. Its id is the token's sid claim."""

    __tablename__ = "auth_session"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    refreshed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class PasswordResetToken(CuidMixin, Base):
    """One-time reset token; only the SHA-256 of the token is stored."""

    __tablename__ = "password_reset_token"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
