"""FileAccessScope: per-role visibility, ordering, caching and admin deletion."""

from decimal import Decimal

import pytest
import redis.asyncio as redis

from portal.application.dtos.file import FileWithProject
from portal.application.dtos.session import Actor
from portal.application.services.file_access_scope import FileAccessScope, list_visible
from portal.core.constants import CACHE_PREFIX_FILE_VIEW
from portal.domain.entities import Profile, ProjectEntity, ServiceLine
from portal.domain.enums import FileType, Role
from portal.domain.exceptions import AuthorizationException, ResourceNotFoundException
from portal.infrastructure.cache.redis_cache import CacheService
from portal.infrastructure.persistence.after_commit import AfterCommit
from tests.fakes import (
    InMemoryCache,
    InMemoryFileRepository,
    InMemoryProfileRepository,
    InMemoryProjectRepository,
    InMemoryStorage,
    at,
)

CLIENT_A = Actor(id="client-a", email="a@example.com", role=Role.CLIENT)
CLIENT_B = Actor(id="client-b", email="b@example.com", role=Role.CLIENT)
ADMIN = Actor(id="admin-1", email="admin@example.com", role=Role.ADMIN)
CREATIVE = Actor(id="creative-1", email="c@example.com", role=Role.CREATIVE)


def _draft(client_id: str, title: str) -> ProjectEntity:
    return ProjectEntity(
        id=None,
        client_id=client_id,
        title=title,
        services_selected=(ServiceLine("logo", "Logo Design", Decimal("1500")),),
        total_price=Decimal("1500"),
    )


@pytest.fixture
async def world():
    """Two clients with one project each; A has two files, B has one."""
    profiles = InMemoryProfileRepository(
        [
            Profile(id=CLIENT_A.id, role=Role.CLIENT, full_name="Ada"),
            Profile(id=CLIENT_B.id, role=Role.CLIENT, full_name="Bo"),
        ]
    )
    projects = InMemoryProjectRepository(profiles)
    files = InMemoryFileRepository(projects)
    storage = InMemoryStorage()
    project_a = await projects.create_project(_draft(CLIENT_A.id, "Ada Bakery"))
    project_b = await projects.create_project(_draft(CLIENT_B.id, "Bo Studio"))
    files.add(project_a.id, "a-concept.png", at(10), storage_ref="refs/a1")
    files.add(project_a.id, "a-final.pdf", at(30), FileType.FINAL, storage_ref="refs/a2")
    files.add(project_b.id, "b-concept.png", at(20), storage_ref="refs/b1")
    for ref in ("refs/a1", "refs/a2", "refs/b1"):
        storage.objects[ref] = b"data"
    return files, storage, project_a, project_b


async def test_each_client_sees_only_own_files(world) -> None:
    files, storage, project_a, project_b = world
    scope = FileAccessScope(files, storage)

    seen_a = await scope.list_for(CLIENT_A)
    seen_b = await scope.list_for(CLIENT_B)

    assert [v.file_name for v in seen_a] == ["a-final.pdf", "a-concept.png"]
    assert [v.file_name for v in seen_b] == ["b-concept.png"]
    assert all(v.project_title is None and v.client_name is None for v in seen_a + seen_b)


async def test_admin_sees_all_with_project_and_client(world) -> None:
    files, storage, *_ = world
    views = await FileAccessScope(files, storage).list_for(ADMIN)

    assert [v.file_name for v in views] == ["a-final.pdf", "b-concept.png", "a-concept.png"]
    assert views[0].project_title == "Ada Bakery"
    assert views[0].client_name == "Ada"
    assert views[1].client_name == "Bo"


async def test_creative_without_projects_sees_nothing(world) -> None:
    files, storage, *_ = world
    assert await FileAccessScope(files, storage).list_for(CREATIVE) == []


async def test_same_timestamp_newest_insert_first(world) -> None:
    files, storage, project_a, _ = world
    files.add(project_a.id, "tie-1.png", at(40))
    files.add(project_a.id, "tie-2.png", at(40))
    views = await FileAccessScope(files, storage).list_for(CLIENT_A)
    assert [v.file_name for v in views][:2] == ["tie-2.png", "tie-1.png"]


async def test_orphan_files_visible_to_admin_only(world) -> None:
    files, *_ = world
    orphan = files.add("gone", "orphan.png", at(50))
    items = [FileWithProject(file=orphan, project=None)]
    assert list_visible(CLIENT_A, items) == []
    admin_views = list_visible(ADMIN, items)
    assert admin_views[0].project_title is None


async def test_get_visible_hides_other_clients_files(world) -> None:
    files, storage, *_ = world
    scope = FileAccessScope(files, storage)
    b_file = next(f for f in files.files.values() if f.file_name == "b-concept.png")

    with pytest.raises(ResourceNotFoundException):
        await scope.get_visible(CLIENT_A, b_file.id)
    assert (await scope.get_visible(CLIENT_B, b_file.id)).file.id == b_file.id
    assert (await scope.get_visible(ADMIN, b_file.id)).file.id == b_file.id


async def test_delete_is_admin_only(world) -> None:
    files, storage, project_a, _ = world
    scope = FileAccessScope(files, storage)
    target = next(f for f in files.files.values() if f.project_id == project_a.id)

    with pytest.raises(AuthorizationException):
        await scope.delete(CLIENT_A, target.id)
    assert target.id in files.files

    await scope.delete(ADMIN, target.id)
    assert target.id not in files.files
    assert target.storage_ref not in storage.objects


async def test_delete_missing_file(world) -> None:
    files, storage, *_ = world
    with pytest.raises(ResourceNotFoundException):
        await FileAccessScope(files, storage).delete(ADMIN, "file-404")


async def test_delete_tolerates_missing_object(world) -> None:
    files, storage, *_ = world
    target = next(iter(files.files.values()))
    storage.objects.pop(target.storage_ref)
    await FileAccessScope(files, storage).delete(ADMIN, target.id)
    assert target.id not in files.files


async def test_cached_views_are_served_and_invalidated(world) -> None:
    files, storage, project_a, _ = world
    cache = InMemoryCache()
    scope = FileAccessScope(files, storage, cache=cache)

    first = await scope.list_for(CLIENT_A)
    assert f"{CACHE_PREFIX_FILE_VIEW}:client:{CLIENT_A.id}" in cache.data

    files.add(project_a.id, "late.png", at(90))
    assert await scope.list_for(CLIENT_A) == first

    await scope.invalidate()
    assert cache.data == {}
    refreshed = await scope.list_for(CLIENT_A)
    assert refreshed[0].file_name == "late.png"


class _ScanlessRedis:
    """Redis stand-in that stores values but cannot SCAN."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.values[key] = value

    async def scan_iter(self, match: str):
        raise redis.ConnectionError("connection reset")
        yield


async def test_failed_invalidation_never_serves_deleted_file(world) -> None:
    files, storage, project_a, _ = world
    scope = FileAccessScope(files, storage, cache=CacheService(redis_client=_ScanlessRedis()))
    target = next(f for f in files.files.values() if f.project_id == project_a.id)

    assert target.id in [v.id for v in await scope.list_for(CLIENT_A)]
    await scope.delete(ADMIN, target.id)

    assert target.id not in [v.id for v in await scope.list_for(CLIENT_A)]


async def test_delete_defers_object_and_cache_work_until_commit(world) -> None:
    files, storage, project_a, _ = world
    cache = InMemoryCache()
    hooks = AfterCommit()
    scope = FileAccessScope(files, storage, cache=cache, after_commit=hooks)
    target = next(f for f in files.files.values() if f.project_id == project_a.id)
    await scope.list_for(CLIENT_A)

    await scope.delete(ADMIN, target.id)

    assert target.id not in files.files
    assert target.storage_ref in storage.objects
    assert cache.data != {}
    assert len(hooks) == 2

    await hooks.run()

    assert target.storage_ref not in storage.objects
    assert cache.data == {}
