"""Domain enumerations for the portal.

Enums represent fixed sets of domain values (roles, project status, file kind).
"""

from enum import Enum


class Role(str, Enum):
    """Role attached to a profile.

    UNASSIGNED stands for a missing or unrecognised stored role and is
    never treated as an affirmative role.
    """

    CLIENT = "client"
    CREATIVE = "creative"
    ADMIN = "admin"
    UNASSIGNED = "unassigned"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]

    @classmethod
    def assignable(cls) -> list[str]:
        """Roles an admin may set on a profile."""
        return [role.value for role in cls if role is not cls.UNASSIGNED]

    @classmethod
    def parse(cls, raw: str | None) -> "Role":
        """Map a stored role string to a Role; None or unknown strings become UNASSIGNED.

        Args:
            raw: Value read from the profiles table (may be None).

        Returns:
            The matching Role.
        """
        if raw is None:
            return cls.UNASSIGNED
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.UNASSIGNED


class ProjectStatus(str, Enum):
    """Project workflow status, ordered onboarding < active < completed."""

    ONBOARDING = "onboarding"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]

    @property
    def rank(self) -> int:
        """Position in the workflow order (0 = onboarding)."""
        return list(ProjectStatus).index(self)


class FileType(str, Enum):
    """Kind of deliverable file attached to a project."""

    CONCEPT = "concept"
    FINAL = "final"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid file type values as strings."""
        return [file_type.value for file_type in cls]


class AccessRequirement(str, Enum):
    """What a route needs before it admits a caller."""

    AUTHENTICATED = "authenticated"
    ADMIN = "admin"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid requirement values as strings."""
        return [requirement.value for requirement in cls]
