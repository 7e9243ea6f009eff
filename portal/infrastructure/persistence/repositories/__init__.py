from portal.infrastructure.persistence.repositories.account_repo import (
    AccountRepository,
    AuthSessionRepository,
    PasswordResetTokenStore,
)
from portal.infrastructure.persistence.repositories.base import BaseRepository, remote_operation
from portal.infrastructure.persistence.repositories.file_repo import FileRepository
from portal.infrastructure.persistence.repositories.profile_repo import ProfileRepository
from portal.infrastructure.persistence.repositories.project_repo import ProjectRepository

__all__ = [
    "AccountRepository",
    "AuthSessionRepository",
    "BaseRepository",
    "FileRepository",
    "PasswordResetTokenStore",
    "ProfileRepository",
    "ProjectRepository",
    "remote_operation",
]
