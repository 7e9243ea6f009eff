"""File API: the caller's visible deliverables, scoped downloads and admin deletes."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import StreamingResponse

from portal.api.v1.dependencies import AdminActor, CurrentActor, get_file_service
from portal.application.use_cases.files import FileService
from portal.core.limiter import limit_writes
from portal.schemas.file import FileResponse

router = APIRouter()

FileSvc = Annotated[FileService, Depends(get_file_service)]


@router.get("", response_model=list[FileResponse])
async def list_files(actor: CurrentActor, files: FileSvc):
    """Admins: every file with project and client. Clients: files of their projects."""
    return [FileResponse.model_validate(f) for f in await files.list_visible_files(actor)]


@router.get("/{file_id}/download")
async def download_file(file_id: str, actor: CurrentActor, files: FileSvc):
    download = await files.download(actor, file_id)
    disposition = f"attachment; filename*=UTF-8''{quote(download.file.file_name)}"
    return StreamingResponse(
        download.stream,
        media_type=download.content_type,
        headers={"Content-Disposition": disposition},
    )


@router.delete("/{file_id}", status_code=204)
@limit_writes
async def delete_file(
    request: Request, file_id: str, actor: AdminActor, files: FileSvc
) -> Response:
    """Irreversibly delete the file row and its stored object."""
    await files.delete(actor, file_id)
    return Response(status_code=204)
