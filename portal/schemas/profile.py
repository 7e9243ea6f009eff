"""Profile API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portal.domain.enums import Role


class ProfileResponse(BaseModel):
    """A profile as returned to its owner or an admin."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    role: Role
    full_name: str | None = None
    company: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    """PATCH /profiles/me. Omitted fields stay unchanged."""

    full_name: str | None = Field(default=None, max_length=200)
    company: str | None = Field(default=None, max_length=200)
    avatar_url: str | None = Field(default=None, max_length=2048)


class RoleChangeRequest(BaseModel):
    role: Role = Field(..., description="client, creative or admin")
