"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from portal.domain.entities.identity import AuthSession, Identity
from portal.domain.entities.profile import Profile
from portal.domain.entities.project import (
    CreativeBrief,
    ProjectEntity,
    ServiceLine,
)
from portal.domain.entities.project_file import ProjectFile

__all__ = [
    "AuthSession",
    "CreativeBrief",
    "Identity",
    "Profile",
    "ProjectEntity",
    "ProjectFile",
    "ServiceLine",
]
