"""Project API: brief submission, scoped reads, admin updates, stats and deletes."""

from decimal import Decimal

from httpx import AsyncClient

from portal.domain.enums import Role
from tests.fakes import InMemoryFileRepository, InMemoryStorage

BRIEF = {
    "company": "Acme Coffee",
    "service_ids": ["identity"],
    "brief": {"industry": "Coffee", "description": "Third-wave roaster", "style": "Warm"},
}


async def _submit(client: AsyncClient, headers: dict[str, str], **overrides) -> dict:
    response = await client.post("/api/v1/projects", json={**BRIEF, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_submit_brief_creates_onboarding_project(client: AsyncClient, sign_in_as) -> None:
    headers = sign_in_as("cleo@example.com", full_name="Cleo")

    data = await _submit(client, headers)

    assert data["title"] == "Acme Coffee"
    assert data["client_name"] == "Cleo"
    assert Decimal(str(data["total_price"])) == Decimal("3500")
    assert data["deposit_amount"] == 1050
    assert data["deposit_paid"] is False
    assert data["status"] == "onboarding"
    assert data["current_stage"] == 1
    assert data["progress_percent"] == 20
    assert data["brief"]["industry"] == "Coffee"
    assert [s["id"] for s in data["services_selected"]] == ["identity"]


async def test_submit_brief_requires_sign_in(client: AsyncClient) -> None:
    response = await client.post("/api/v1/projects", json=BRIEF)
    assert response.status_code == 401
    assert response.json()["details"]["redirect_to"] == "/auth"


async def test_submit_brief_unknown_service(client: AsyncClient, sign_in_as) -> None:
    headers = sign_in_as("cleo@example.com")
    response = await client.post(
        "/api/v1/projects", json={**BRIEF, "service_ids": ["mural"]}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_clients_see_only_their_projects(client: AsyncClient, sign_in_as) -> None:
    cleo = sign_in_as("cleo@example.com")
    otto = sign_in_as("otto@example.com")
    mine = await _submit(client, cleo)
    theirs = await _submit(client, otto, company="Otto Bikes")

    listed = (await client.get("/api/v1/projects", headers=cleo)).json()
    assert [p["id"] for p in listed] == [mine["id"]]

    hidden = await client.get(f"/api/v1/projects/{theirs['id']}", headers=cleo)
    assert hidden.status_code == 404


async def test_admin_lists_and_filters_all_projects(client: AsyncClient, sign_in_as) -> None:
    await _submit(client, sign_in_as("cleo@example.com", full_name="Cleo"))
    await _submit(client, sign_in_as("otto@example.com", full_name="Otto"), company="Otto Bikes")
    admin = sign_in_as("ada@example.com", Role.ADMIN)

    listed = (await client.get("/api/v1/projects", headers=admin)).json()
    assert [p["title"] for p in listed] == ["Otto Bikes", "Acme Coffee"]

    searched = await client.get("/api/v1/projects", params={"search": "cleo"}, headers=admin)
    assert [p["title"] for p in searched.json()] == ["Acme Coffee"]

    active = await client.get("/api/v1/projects", params={"status": "active"}, headers=admin)
    assert active.json() == []


async def test_client_cannot_use_admin_routes(client: AsyncClient, sign_in_as) -> None:
    cleo = sign_in_as("cleo@example.com")
    project = await _submit(client, cleo)

    stats = await client.get("/api/v1/projects/stats", headers=cleo)
    patch = await client.patch(
        f"/api/v1/projects/{project['id']}", json={"current_stage": 3}, headers=cleo
    )

    for response in (stats, patch):
        assert response.status_code == 403
        assert response.json()["details"]["redirect_to"] == "/dashboard"


async def test_admin_update_returns_regression_warnings(client: AsyncClient, sign_in_as) -> None:
    project = await _submit(client, sign_in_as("cleo@example.com"))
    admin = sign_in_as("ada@example.com", Role.ADMIN)
    url = f"/api/v1/projects/{project['id']}"

    forward = await client.patch(
        url, json={"status": "active", "current_stage": 3, "deposit_paid": True}, headers=admin
    )
    assert forward.status_code == 200
    assert forward.json()["warnings"] == []
    assert forward.json()["project"]["progress_percent"] == 60
    assert forward.json()["project"]["deposit_paid"] is True

    back = await client.patch(url, json={"current_stage": 2}, headers=admin)
    assert back.status_code == 200
    assert back.json()["warnings"] == ["Stage moved back from 3 to 2"]
    assert back.json()["project"]["current_stage"] == 2


async def test_admin_update_rejects_completed_before_last_stage(
    client: AsyncClient, sign_in_as
) -> None:
    project = await _submit(client, sign_in_as("cleo@example.com"))
    admin = sign_in_as("ada@example.com", Role.ADMIN)

    response = await client.patch(
        f"/api/v1/projects/{project['id']}", json={"status": "completed"}, headers=admin
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "status"}


async def test_admin_update_out_of_range_stage_returns_422(
    client: AsyncClient, sign_in_as
) -> None:
    project = await _submit(client, sign_in_as("cleo@example.com"))
    admin = sign_in_as("ada@example.com", Role.ADMIN)
    response = await client.patch(
        f"/api/v1/projects/{project['id']}", json={"current_stage": 6}, headers=admin
    )
    assert response.status_code == 422


async def test_admin_update_unknown_project(client: AsyncClient, sign_in_as) -> None:
    admin = sign_in_as("ada@example.com", Role.ADMIN)
    response = await client.patch(
        "/api/v1/projects/missing", json={"current_stage": 2}, headers=admin
    )
    assert response.status_code == 404


async def test_stats(client: AsyncClient, sign_in_as) -> None:
    await _submit(client, sign_in_as("cleo@example.com", full_name="Cleo"))
    await _submit(client, sign_in_as("otto@example.com"), company="Otto Bikes")
    admin = sign_in_as("ada@example.com", Role.ADMIN)

    data = (await client.get("/api/v1/projects/stats", headers=admin)).json()

    assert data["total_projects"] == 2
    assert data["by_status"] == {"onboarding": 2, "active": 0, "completed": 0}
    assert data["total_clients"] == 2
    assert [p["title"] for p in data["recent"]] == ["Otto Bikes", "Acme Coffee"]


async def test_delete_project_removes_files(
    client: AsyncClient,
    sign_in_as,
    files: InMemoryFileRepository,
    storage: InMemoryStorage,
) -> None:
    project = await _submit(client, sign_in_as("cleo@example.com"))
    admin = sign_in_as("ada@example.com", Role.ADMIN)
    await client.post(
        f"/api/v1/projects/{project['id']}/files",
        files={"file": ("logo.png", b"png-bytes", "image/png")},
        data={"type": "concept"},
        headers=admin,
    )
    assert storage.objects

    response = await client.delete(f"/api/v1/projects/{project['id']}", headers=admin)

    assert response.status_code == 204
    assert files.files == {}
    assert storage.objects == {}
    missing = await client.get(f"/api/v1/projects/{project['id']}", headers=admin)
    assert missing.status_code == 404


async def test_admin_completes_project(client: AsyncClient, sign_in_as) -> None:
    project = await _submit(
        client, sign_in_as("cleo@example.com"), service_ids=["logo", "social"]
    )
    assert Decimal(str(project["total_price"])) == Decimal("3500")
    admin = sign_in_as("ada@example.com", Role.ADMIN)
    url = f"/api/v1/projects/{project['id']}"
    await client.patch(url, json={"status": "active", "current_stage": 3}, headers=admin)

    response = await client.patch(
        url, json={"status": "completed", "current_stage": 5}, headers=admin
    )

    assert response.status_code == 200
    assert response.json()["warnings"] == []
    assert response.json()["project"]["progress_percent"] == 100
    assert response.json()["project"]["stage_label"]
