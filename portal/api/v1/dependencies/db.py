"""Repository, storage and use-case dependencies (composition root).

Every write-capable repository in a request shares the transactional session
from get_db_transactional; it commits when the request succeeds, and the
session's post-commit queue runs after that.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.interfaces.repositories import (
    IFileRepository,
    IProfileRepository,
    IProjectRepository,
)
from portal.application.interfaces.services import (
    IAfterCommit,
    ICacheService,
    IStorageService,
)
from portal.application.services.file_access_scope import FileAccessScope
from portal.application.use_cases.catalog import CatalogService
from portal.application.use_cases.files import FileService
from portal.application.use_cases.profiles import ProfileService
from portal.application.use_cases.projects import ProjectService
from portal.core.config import get_settings
from portal.infrastructure.external.storage import get_storage
from portal.infrastructure.persistence.after_commit import after_commit_for
from portal.infrastructure.persistence.database import get_db_transactional
from portal.infrastructure.persistence.repositories import (
    FileRepository,
    ProfileRepository,
    ProjectRepository,
)


async def get_profile_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ProfileRepository:
    return ProfileRepository(db)


async def get_project_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ProjectRepository:
    return ProjectRepository(db)


async def get_file_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> FileRepository:
    return FileRepository(db)


async def get_after_commit(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IAfterCommit:
    return after_commit_for(db)


def get_storage_service() -> IStorageService:
    """Configured object storage backend (local or S3)."""
    return get_storage()


def get_cache(request: Request) -> ICacheService | None:
    """Redis cache connected in the lifespan, or None when disabled."""
    return getattr(request.app.state, "cache", None)


def get_catalog_service() -> CatalogService:
    settings = get_settings()
    return CatalogService(deposit_rate=settings.deposit_rate, currency=settings.currency)


async def get_file_scope(
    files: Annotated[IFileRepository, Depends(get_file_repo)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
    after_commit: Annotated[IAfterCommit, Depends(get_after_commit)],
) -> FileAccessScope:
    return FileAccessScope(
        files,
        storage,
        cache=cache,
        cache_ttl=get_settings().cache_ttl_file_views,
        after_commit=after_commit,
    )


async def get_profile_service(
    profiles: Annotated[IProfileRepository, Depends(get_profile_repo)],
) -> ProfileService:
    return ProfileService(profiles)


async def get_project_service(
    projects: Annotated[IProjectRepository, Depends(get_project_repo)],
    profiles: Annotated[IProfileRepository, Depends(get_profile_repo)],
    files: Annotated[IFileRepository, Depends(get_file_repo)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    file_scope: Annotated[FileAccessScope, Depends(get_file_scope)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProjectService:
    return ProjectService(projects, profiles, files, storage, file_scope, catalog)


async def get_file_service(
    projects: Annotated[IProjectRepository, Depends(get_project_repo)],
    files: Annotated[IFileRepository, Depends(get_file_repo)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
    file_scope: Annotated[FileAccessScope, Depends(get_file_scope)],
) -> FileService:
    settings = get_settings()
    return FileService(
        projects,
        files,
        storage,
        file_scope,
        max_upload_size=settings.max_upload_size,
        allowed_mime_types=settings.allowed_mime_type_list,
        key_prefix=settings.storage_bucket_prefix,
    )
