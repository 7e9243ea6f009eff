"""Domain layer: entities, enums, lifecycle rules and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from portal.domain.entities import (
    AuthSession,
    CreativeBrief,
    Identity,
    Profile,
    ProjectEntity,
    ProjectFile,
    ServiceLine,
)
from portal.domain.enums import AccessRequirement, FileType, ProjectStatus, Role
from portal.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    PortalException,
    RemoteFailureException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    "AccessRequirement",
    "AuthSession",
    "AuthenticationException",
    "AuthorizationException",
    "CreativeBrief",
    "FileType",
    "Identity",
    "PortalException",
    "Profile",
    "ProjectEntity",
    "ProjectFile",
    "ProjectStatus",
    "RemoteFailureException",
    "ResourceNotFoundException",
    "Role",
    "ServiceLine",
    "ValidationException",
]
