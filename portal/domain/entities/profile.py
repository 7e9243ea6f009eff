"""Profile domain entity.

Application-level attributes of an identity, keyed by the identity id.
"""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.enums import Role
from portal.domain.exceptions import ValidationException


@dataclass(frozen=True)
class Profile:
    """Profile of an identity; role is always a Role (never None)."""

    id: str
    role: Role
    full_name: str | None = None
    company: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationException("Profile ID is required", field="id")
        if not isinstance(self.role, Role):
            raise ValidationException("Profile role must be a Role", field="role")

    @property
    def is_admin(self) -> bool:
        """Return True only for the affirmative admin role."""
        return self.role is Role.ADMIN
