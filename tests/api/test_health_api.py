"""Health endpoint and app-wide response headers."""

from httpx import AsyncClient

from portal.core.config import get_settings


async def test_health_returns_200(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == get_settings().app_version


async def test_security_headers_present(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Cache-Control" not in response.headers


async def test_session_routes_are_not_cached(client: AsyncClient) -> None:
    response = await client.get("/api/v1/session")
    assert response.headers["Cache-Control"] == "no-store"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Correlation-ID"] == "req-123"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id;forged"})
    assert response.headers["X-Request-ID"] != "bad id;forged"
    assert len(response.headers["X-Request-ID"]) == 36


async def test_oversized_body_rejected(client: AsyncClient) -> None:
    limit = get_settings().max_upload_size + 64 * 1024
    response = await client.post(
        "/api/v1/auth/sign-in",
        content=b"{}",
        headers={"Content-Length": str(limit + 1), "Content-Type": "application/json"},
    )
    assert response.status_code == 413
    assert response.json()["error"] == "PAYLOAD_TOO_LARGE"
