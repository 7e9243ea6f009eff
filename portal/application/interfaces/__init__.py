"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from portal.infrastructure or portal.api.
"""

from portal.application.interfaces.repositories import (
    IFileRepository,
    IProfileRepository,
    IProjectRepository,
)
from portal.application.interfaces.services import (
    AfterCommitAction,
    IAfterCommit,
    ICacheService,
    IIdentityProvider,
    IStorageService,
    SessionCallback,
)

__all__ = [
    "AfterCommitAction",
    "IAfterCommit",
    "ICacheService",
    "IFileRepository",
    "IIdentityProvider",
    "IProfileRepository",
    "IProjectRepository",
    "IStorageService",
    "SessionCallback",
]
