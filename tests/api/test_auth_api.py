"""Auth API: sign-up, sign-in, sign-out, refresh and password reset."""

from httpx import AsyncClient

from tests.fakes import IdentityDirectory, InMemoryProfileRepository


async def test_sign_up_creates_client_profile(
    client: AsyncClient, profiles: InMemoryProfileRepository
) -> None:
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={"email": "ada@example.com", "password": "long-enough", "full_name": "Ada <b>L</b>"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "ada@example.com"
    assert data["access_token"]
    assert data["needs_confirmation"] is False

    profile = profiles.profiles[data["user_id"]]
    assert profile.role.value == "client"
    assert profile.full_name == "Ada L"


async def test_sign_up_token_opens_session(client: AsyncClient) -> None:
    created = await client.post(
        "/api/v1/auth/sign-up",
        json={"email": "ada@example.com", "password": "long-enough"},
    )
    token = created.json()["access_token"]

    response = await client.get("/api/v1/session", headers={"Authorization": f"Bearer {token}"})

    data = response.json()
    assert data["identity"]["email"] == "ada@example.com"
    assert data["role"] == "client"
    assert data["resolving"] is False


async def test_sign_up_duplicate_email_returns_409(
    client: AsyncClient, directory: IdentityDirectory
) -> None:
    directory.add_account("ada@example.com")
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={"email": "ada@example.com", "password": "long-enough"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "EMAIL_ALREADY_REGISTERED"


async def test_sign_up_short_password_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/sign-up", json={"email": "ada@example.com", "password": "short"}
    )
    assert response.status_code == 422


async def test_sign_in_returns_token(client: AsyncClient, directory: IdentityDirectory) -> None:
    directory.add_account("ada@example.com", password="correct-horse")
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "ada@example.com", "password": "correct-horse"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"] in directory.sessions
    assert response.headers["Cache-Control"] == "no-store"


async def test_sign_in_bad_password_returns_401(
    client: AsyncClient, directory: IdentityDirectory
) -> None:
    directory.add_account("ada@example.com", password="correct-horse")
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "ada@example.com", "password": "wrong-horse"},
    )
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_sign_out_ends_session(
    client: AsyncClient, directory: IdentityDirectory, sign_in_as
) -> None:
    headers = sign_in_as("ada@example.com")

    response = await client.post("/api/v1/auth/sign-out", headers=headers)

    assert response.status_code == 204
    assert directory.sessions == {}
    session = (await client.get("/api/v1/session", headers=headers)).json()
    assert session["identity"] is None


async def test_sign_out_without_token_is_noop(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/sign-out")
    assert response.status_code == 204


async def test_refresh_without_session_returns_401(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/refresh")
    assert response.status_code == 401


async def test_refresh_extends_session(client: AsyncClient, sign_in_as) -> None:
    headers = sign_in_as("ada@example.com")
    response = await client.post("/api/v1/auth/refresh", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "ada@example.com"


async def test_password_reset_same_answer_for_unknown_email(
    client: AsyncClient, directory: IdentityDirectory
) -> None:
    directory.add_account("ada@example.com")
    known = await client.post("/api/v1/auth/password-reset", json={"email": "ada@example.com"})
    unknown = await client.post(
        "/api/v1/auth/password-reset", json={"email": "nobody@example.com"}
    )
    assert known.status_code == unknown.status_code == 202
    assert known.json() == unknown.json()
    assert directory.reset_requests == ["ada@example.com", "nobody@example.com"]


async def test_password_reset_confirm(
    client: AsyncClient, directory: IdentityDirectory
) -> None:
    directory.add_account("ada@example.com")
    await client.post("/api/v1/auth/password-reset", json={"email": "ada@example.com"})

    response = await client.post(
        "/api/v1/auth/password-reset/confirm",
        json={
            "token": "reset-ada@example.com",
            "password": "brand-new-pass",
            "password_confirm": "brand-new-pass",
        },
    )

    assert response.status_code == 200
    sign_in = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": "ada@example.com", "password": "brand-new-pass"},
    )
    assert sign_in.status_code == 200


async def test_password_reset_confirm_invalid_token(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/password-reset/confirm",
        json={"token": "nope", "password": "brand-new-pass", "password_confirm": "brand-new-pass"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_RESET_TOKEN"


async def test_password_reset_confirm_mismatch_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/password-reset/confirm",
        json={"token": "t", "password": "brand-new-pass", "password_confirm": "other-new-pass"},
    )
    assert response.status_code == 422
