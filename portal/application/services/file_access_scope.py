"""File access scoping: who sees which deliverable files.

list_visible() is the rule itself (pure). FileAccessScope adds the per-actor
view cache and admin-only deletion on top of the file repository. Work that
must not happen unless the row change commits (object removal, cache
invalidation) goes through on_commit().
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import partial

from portal.application.dtos.file import FileView, FileWithProject
from portal.application.dtos.session import Actor
from portal.application.interfaces.repositories import IFileRepository
from portal.application.interfaces.services import (
    AfterCommitAction,
    IAfterCommit,
    ICacheService,
    IStorageService,
)
from portal.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_FILE_VIEW
from portal.domain.entities import ProjectFile
from portal.domain.exceptions import AuthorizationException, ResourceNotFoundException

logger = logging.getLogger(__name__)


def _view(file: ProjectFile, project_title: str | None = None, client_name: str | None = None) -> FileView:
    return FileView(
        id=file.id,
        seq=file.seq,
        project_id=file.project_id,
        file_name=file.file_name,
        file_url=file.file_url,
        type=file.type,
        uploaded_at=file.uploaded_at,
        project_title=project_title,
        client_name=client_name,
    )


def can_view(actor: Actor, item: FileWithProject) -> bool:
    """Admins see every file; others only files of projects they own."""
    if actor.is_admin:
        return True
    return item.project is not None and item.project.client_id == actor.id


def list_visible(actor: Actor, files: Iterable[FileWithProject]) -> list[FileView]:
    """Files the actor may see, newest upload first (insertion order breaks ties).

    Admin views carry the project title and client name; files whose project
    no longer exists are shown to admins only.
    """
    views: list[FileView] = []
    for item in files:
        if not can_view(actor, item):
            continue
        if actor.is_admin:
            project = item.project
            views.append(
                _view(
                    item.file,
                    project_title=project.title if project else None,
                    client_name=project.client_name if project else None,
                )
            )
        else:
            views.append(_view(item.file))
    views.sort(key=lambda v: (v.uploaded_at, v.seq), reverse=True)
    return views


class FileAccessScope:
    """Scoped file listing with an optional per-actor cache, plus admin deletion."""

    def __init__(
        self,
        files: IFileRepository,
        storage: IStorageService,
        cache: ICacheService | None = None,
        cache_ttl: int = 120,
        after_commit: IAfterCommit | None = None,
    ) -> None:
        self.files = files
        self.storage = storage
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.after_commit = after_commit

    async def on_commit(self, action: AfterCommitAction) -> None:
        """Queue action behind the request transaction; run it now if there is none."""
        if self.after_commit is None:
            await action()
        else:
            self.after_commit.add(action)

    @staticmethod
    def _cache_key(actor: Actor) -> str:
        return CACHE_KEY_SEP.join((CACHE_PREFIX_FILE_VIEW, actor.role.value, actor.id))

    async def list_for(self, actor: Actor) -> list[FileView]:
        """Visible files for actor. Uses the cache when available."""
        key = self._cache_key(actor)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(key)
            if cached is not None:
                return [FileView.from_dict(item) for item in cached]

        rows = await self.files.list_with_projects(
            client_id=None if actor.is_admin else actor.id
        )
        views = list_visible(actor, rows)
        if self.cache and self.cache.is_available():
            await self.cache.set(key, [v.to_dict() for v in views], ttl=self.cache_ttl)
        return views

    async def get_visible(self, actor: Actor, file_id: str) -> FileWithProject:
        """Return the file if actor may see it; invisible files are reported as missing."""
        item = await self.files.get_with_project(file_id)
        if item is None or not can_view(actor, item):
            raise ResourceNotFoundException("file", file_id)
        return item

    async def delete(self, actor: Actor, file_id: str) -> None:
        """Admin-only, irreversible: delete the row; once that commits, the stored object.

        Raises:
            AuthorizationException: actor is not an admin.
            ResourceNotFoundException: no such file.
        """
        if not actor.is_admin:
            raise AuthorizationException(resource="file", action="delete")
        item = await self.files.get_with_project(file_id)
        if item is None:
            raise ResourceNotFoundException("file", file_id)
        await self.files.delete_file(file_id)
        if item.file.storage_ref:
            await self.on_commit(partial(self._remove_object, file_id, item.file.storage_ref))
        await self.on_commit(self.invalidate)
        logger.info("File %s deleted by %s", file_id, actor.id)

    async def _remove_object(self, file_id: str, storage_ref: str) -> None:
        if not await self.storage.delete(storage_ref):
            logger.warning("Stored object already missing for file %s (%s)", file_id, storage_ref)

    async def invalidate(self) -> None:
        """Drop every cached file view (any upload or delete can change them)."""
        if self.cache and self.cache.is_available():
            await self.cache.delete_pattern(f"{CACHE_PREFIX_FILE_VIEW}{CACHE_KEY_SEP}*")
