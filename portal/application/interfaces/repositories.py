"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from portal.application.dtos.file import FileWithProject
    from portal.application.dtos.project import ProjectListFilter, ProjectSummary
    from portal.domain.entities import Profile, ProjectEntity, ProjectFile
    from portal.domain.enums import FileType, Role


class IProfileRepository(Protocol):
    """Protocol for the profiles table."""

    async def get_by_id(self, profile_id: str) -> Profile | None:
        """Return the profile keyed by identity id, or None."""

    async def create_profile(
        self,
        profile_id: str,
        role: Role,
        full_name: str | None = None,
        company: str | None = None,
    ) -> Profile:
        """Insert the profile row for a new identity."""

    async def update_fields(
        self,
        profile_id: str,
        full_name: str | None = None,
        company: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile | None:
        """Update non-None fields; return the updated profile or None if missing."""

    async def set_role(self, profile_id: str, role: Role) -> Profile | None:
        """Change the role; return the updated profile or None if missing."""

    async def list_profiles(self, role: Role | None = None) -> list[Profile]:
        """Return profiles, newest first, optionally filtered by role."""

    async def count_by_role(self, role: Role) -> int:
        """Return how many profiles hold the role."""


class IProjectRepository(Protocol):
    """Protocol for the projects table."""

    async def create_project(self, project: ProjectEntity) -> ProjectEntity:
        """Insert a new project; returns it with id and timestamps."""

    async def get_by_id(self, project_id: str) -> ProjectEntity | None:
        """Return the project (with client name), or None."""

    async def save(self, project: ProjectEntity) -> ProjectEntity:
        """Persist status, stage and deposit of an existing project."""

    async def list_for_client(self, client_id: str) -> list[ProjectEntity]:
        """Return the client's projects, most recently updated first."""

    async def list_all(self, filters: ProjectListFilter) -> list[ProjectEntity]:
        """Return all projects, newest created first, filtered."""

    async def list_recent(self, limit: int) -> list[ProjectEntity]:
        """Return the most recently created projects."""

    async def count_by_status(self) -> dict[str, int]:
        """Return project counts per status value."""

    async def get_summary(self, project_id: str) -> ProjectSummary | None:
        """Return id, owner and title of a project, or None."""

    async def delete_project(self, project_id: str) -> bool:
        """Delete the project (file rows cascade). Returns False if missing."""


class IFileRepository(Protocol):
    """Protocol for the project_files table."""

    async def create_file(
        self,
        project_id: str,
        file_name: str,
        file_url: str,
        file_type: FileType,
        storage_ref: str | None,
        uploaded_by: str | None,
    ) -> ProjectFile:
        """Insert a file row."""

    async def get_with_project(self, file_id: str) -> FileWithProject | None:
        """Return the file joined with its project, or None."""

    async def list_with_projects(
        self, client_id: str | None = None
    ) -> list[FileWithProject]:
        """Return files joined with their projects; restrict to one client if given."""

    async def list_for_project(self, project_id: str) -> list[ProjectFile]:
        """Return the project's files, newest first."""

    async def delete_file(self, file_id: str) -> bool:
        """Delete the row. Returns False if missing."""
