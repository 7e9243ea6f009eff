"""FileService: admin uploads, scoped listing and downloads."""

from decimal import Decimal

import pytest

from portal.application.dtos.file import FileUpload
from portal.application.dtos.session import Actor
from portal.application.services.file_access_scope import FileAccessScope
from portal.application.use_cases.files import FileService
from portal.domain.entities import Profile, ProjectEntity, ServiceLine
from portal.domain.enums import FileType, Role
from portal.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import (
    InMemoryFileRepository,
    InMemoryProfileRepository,
    InMemoryProjectRepository,
    InMemoryStorage,
)

CLIENT = Actor(id="client-1", email="c1@example.com", role=Role.CLIENT)
OTHER = Actor(id="client-2", email="c2@example.com", role=Role.CLIENT)
ADMIN = Actor(id="admin-1", email="admin@example.com", role=Role.ADMIN)


@pytest.fixture
async def setup():
    profiles = InMemoryProfileRepository([Profile(id=CLIENT.id, role=Role.CLIENT, full_name="Cleo")])
    projects = InMemoryProjectRepository(profiles)
    files = InMemoryFileRepository(projects)
    storage = InMemoryStorage()
    service = FileService(
        projects=projects,
        files=files,
        storage=storage,
        scope=FileAccessScope(files, storage),
        max_upload_size=1024,
        allowed_mime_types=["image/*", "application/pdf"],
    )
    project = await projects.create_project(
        ProjectEntity(
            id=None,
            client_id=CLIENT.id,
            title="Acme",
            services_selected=(ServiceLine("logo", "Logo Design", Decimal("1500")),),
            total_price=Decimal("1500"),
        )
    )
    return service, files, storage, project


def _upload(project_id: str, **overrides) -> FileUpload:
    fields = {
        "project_id": project_id,
        "file_name": "logo concept.png",
        "content": b"\x89PNG...",
        "content_type": "image/png",
        "type": FileType.CONCEPT,
    }
    fields.update(overrides)
    return FileUpload(**fields)


async def test_admin_upload_stores_object_and_row(setup) -> None:
    service, files, storage, project = setup

    view = await service.upload(ADMIN, _upload(project.id))

    stored = files.files[view.id]
    assert stored.storage_ref.startswith(f"project-files/projects/{project.id}/")
    assert stored.storage_ref.endswith("_logo concept.png")
    assert storage.objects[stored.storage_ref] == b"\x89PNG..."
    assert view.file_url == f"/storage/{stored.storage_ref}"
    assert view.project_title == "Acme"
    assert view.client_name == "Cleo"
    assert stored.uploaded_by == ADMIN.id


async def test_upload_requires_admin(setup) -> None:
    service, files, storage, project = setup
    with pytest.raises(AuthorizationException):
        await service.upload(CLIENT, _upload(project.id))
    assert files.files == {}
    assert storage.objects == {}


async def test_upload_to_missing_project(setup) -> None:
    service, *_ = setup
    with pytest.raises(ResourceNotFoundException):
        await service.upload(ADMIN, _upload("project-404"))


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"content": b""}, "file"),
        ({"content": b"x" * 1025}, "file"),
        ({"content_type": "application/zip"}, "file"),
        ({"file_name": ".."}, "file_name"),
    ],
)
async def test_upload_validation(setup, overrides: dict, field: str) -> None:
    service, files, _, project = setup
    with pytest.raises(ValidationException) as exc_info:
        await service.upload(ADMIN, _upload(project.id, **overrides))
    assert exc_info.value.details == {"field": field}
    assert files.files == {}


async def test_upload_strips_directories_from_name(setup) -> None:
    service, files, _, project = setup
    view = await service.upload(ADMIN, _upload(project.id, file_name="../../etc/passwd.pdf", content_type="application/pdf"))
    assert view.file_name == "passwd.pdf"


async def test_row_failure_removes_stored_object(setup) -> None:
    service, files, storage, project = setup

    async def broken_create_file(**kwargs):
        raise RuntimeError("insert failed")

    files.create_file = broken_create_file
    with pytest.raises(RuntimeError):
        await service.upload(ADMIN, _upload(project.id))
    assert storage.objects == {}


async def test_list_project_files_scoped(setup) -> None:
    service, _, _, project = setup
    await service.upload(ADMIN, _upload(project.id))

    assert len(await service.list_project_files(CLIENT, project.id)) == 1
    with pytest.raises(ResourceNotFoundException):
        await service.list_project_files(OTHER, project.id)


async def test_download_streams_visible_file(setup) -> None:
    service, _, _, project = setup
    view = await service.upload(ADMIN, _upload(project.id))

    download = await service.download(CLIENT, view.id)

    assert download.content_type == "image/png"
    assert b"".join([chunk async for chunk in download.stream]) == b"\x89PNG..."
    with pytest.raises(ResourceNotFoundException):
        await service.download(OTHER, view.id)


async def test_download_of_missing_object_is_not_found(setup) -> None:
    service, files, storage, project = setup
    view = await service.upload(ADMIN, _upload(project.id))
    storage.objects.clear()
    with pytest.raises(ResourceNotFoundException):
        await service.download(ADMIN, view.id)
