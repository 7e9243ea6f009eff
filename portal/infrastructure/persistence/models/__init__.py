"""ORM models. Importing this package registers every table on Base.metadata."""

from portal.infrastructure.persistence.models.account import (
    Account,
    AuthSessionRecord,
    PasswordResetToken,
)
from portal.infrastructure.persistence.models.profile import ProfileRecord
from portal.infrastructure.persistence.models.project import (
    ProjectFileRecord,
    ProjectRecord,
)

__all__ = [
    "Account",
    "AuthSessionRecord",
    "PasswordResetToken",
    "ProfileRecord",
    "ProjectFileRecord",
    "ProjectRecord",
]
