"""File use cases: admin upload, scoped listing and download, admin delete."""

from __future__ import annotations

import fnmatch
import logging
import mimetypes

from portal.application.dtos.file import FileDownload, FileUpload, FileView, FileWithProject
from portal.application.dtos.session import Actor
from portal.application.interfaces.repositories import IFileRepository, IProjectRepository
from portal.application.interfaces.services import IStorageService
from portal.application.services.file_access_scope import FileAccessScope, list_visible
from portal.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.shared.telemetry.tracing import traced
from portal.shared.utils.datetime import epoch_millis, utc_now
from portal.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


class FileService:
    """Deliverable files of projects."""

    def __init__(
        self,
        projects: IProjectRepository,
        files: IFileRepository,
        storage: IStorageService,
        scope: FileAccessScope,
        max_upload_size: int,
        allowed_mime_types: list[str] | None = None,
        key_prefix: str = "project-files",
    ) -> None:
        self.projects = projects
        self.files = files
        self.storage = storage
        self.scope = scope
        self.max_upload_size = max_upload_size
        self.allowed_mime_types = allowed_mime_types or ["*/*"]
        self.key_prefix = key_prefix.strip("/")

    def _check_upload(self, upload: FileUpload) -> str:
        """Validate size and type; return the sanitized file name."""
        if not upload.content:
            raise ValidationException("File is empty", field="file")
        if len(upload.content) > self.max_upload_size:
            raise ValidationException(
                f"File exceeds the {self.max_upload_size} byte limit", field="file"
            )
        if not any(
            fnmatch.fnmatch(upload.content_type, pattern)
            for pattern in self.allowed_mime_types
        ):
            raise ValidationException(
                f"File type not allowed: {upload.content_type}", field="file"
            )
        try:
            return InputSanitizer.sanitize_filename(upload.file_name)
        except ValueError as e:
            raise ValidationException(str(e), field="file_name") from e

    def storage_ref_for(self, project_id: str, file_name: str) -> str:
        """Object key: <prefix>/projects/<project>/<epoch ms>_<name>."""
        return f"{self.key_prefix}/projects/{project_id}/{epoch_millis(utc_now())}_{file_name}"

    @traced("files.upload")
    async def upload(self, actor: Actor, upload: FileUpload) -> FileView:
        """Admin-only: store the object, then record the row."""
        if not actor.is_admin:
            raise AuthorizationException(resource="file", action="upload")
        project = await self.projects.get_summary(upload.project_id)
        if project is None:
            raise ResourceNotFoundException("project", upload.project_id)
        safe_name = self._check_upload(upload)
        storage_ref = self.storage_ref_for(project.id, safe_name)
        await self.storage.upload(
            upload.content,
            storage_ref,
            upload.content_type,
            metadata={"project_id": project.id, "uploaded_by": actor.id},
        )
        try:
            file = await self.files.create_file(
                project_id=project.id,
                file_name=safe_name,
                file_url=self.storage.public_url(storage_ref),
                file_type=upload.type,
                storage_ref=storage_ref,
                uploaded_by=actor.id,
            )
        except Exception:
            await self.storage.delete(storage_ref)
            raise
        await self.scope.on_commit(self.scope.invalidate)
        logger.info("File %s uploaded to project %s by %s", file.id, project.id, actor.id)
        return list_visible(actor, [FileWithProject(file=file, project=project)])[0]

    async def list_project_files(self, actor: Actor, project_id: str) -> list[FileView]:
        """Files of one project the caller may see (not found if the project is hidden)."""
        project = await self.projects.get_summary(project_id)
        if project is None or not (actor.is_admin or project.client_id == actor.id):
            raise ResourceNotFoundException("project", project_id)
        files = await self.files.list_for_project(project_id)
        return list_visible(actor, [FileWithProject(file=f, project=project) for f in files])

    async def list_visible_files(self, actor: Actor) -> list[FileView]:
        return await self.scope.list_for(actor)

    async def download(self, actor: Actor, file_id: str) -> FileDownload:
        """Stream a file the caller may see."""
        item = await self.scope.get_visible(actor, file_id)
        if not item.file.storage_ref or not await self.storage.exists(item.file.storage_ref):
            logger.warning("File %s has no stored object", file_id)
            raise ResourceNotFoundException("file", file_id)
        content_type = (
            mimetypes.guess_type(item.file.file_name)[0] or "application/octet-stream"
        )
        return FileDownload(
            file=item.file,
            content_type=content_type,
            stream=self.storage.download(item.file.storage_ref),
        )

    async def delete(self, actor: Actor, file_id: str) -> None:
        await self.scope.delete(actor, file_id)
