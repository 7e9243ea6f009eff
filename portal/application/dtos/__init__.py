"""Application DTOs: read-models and commands passed between layers."""

from portal.application.dtos.file import FileDownload, FileUpload, FileView, FileWithProject
from portal.application.dtos.profile import ProfileUpdate
from portal.application.dtos.project import (
    BriefSubmission,
    ProjectListFilter,
    ProjectStats,
    ProjectSummary,
    ProjectUpdateResult,
    ProjectView,
    Quote,
)
from portal.application.dtos.session import Actor, SessionState, SignUpResult

__all__ = [
    "Actor",
    "BriefSubmission",
    "FileDownload",
    "FileUpload",
    "FileView",
    "FileWithProject",
    "ProfileUpdate",
    "ProjectListFilter",
    "ProjectStats",
    "ProjectSummary",
    "ProjectUpdateResult",
    "ProjectView",
    "Quote",
    "SessionState",
    "SignUpResult",
]
