"""ProfileService and AuthService over in-memory fakes."""

import pytest

from portal.application.dtos.profile import ProfileUpdate
from portal.application.dtos.session import Actor
from portal.application.use_cases.auth import AuthService
from portal.application.use_cases.profiles import ProfileService
from portal.domain.entities import Profile
from portal.domain.enums import Role
from portal.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    EmailAlreadyRegisteredException,
    InvalidResetTokenException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import IdentityDirectory, InMemoryProfileRepository, at

CLIENT = Actor(id="client-1", email="c1@example.com", role=Role.CLIENT)
ADMIN = Actor(id="admin-1", email="admin@example.com", role=Role.ADMIN)


@pytest.fixture
def profiles() -> InMemoryProfileRepository:
    return InMemoryProfileRepository(
        [
            Profile(id=CLIENT.id, role=Role.CLIENT, full_name="Cleo", created_at=at(1)),
            Profile(id=ADMIN.id, role=Role.ADMIN, created_at=at(2)),
        ]
    )


class TestProfileService:
    async def test_get_own(self, profiles: InMemoryProfileRepository) -> None:
        assert (await ProfileService(profiles).get_own(CLIENT)).full_name == "Cleo"

    async def test_get_own_missing_profile(self, profiles: InMemoryProfileRepository) -> None:
        ghost = Actor(id="ghost", email="g@example.com", role=Role.UNASSIGNED)
        with pytest.raises(ResourceNotFoundException):
            await ProfileService(profiles).get_own(ghost)

    async def test_update_own_sanitizes(self, profiles: InMemoryProfileRepository) -> None:
        updated = await ProfileService(profiles).update_own(
            CLIENT, ProfileUpdate(full_name=" <script>x</script>Cleo P. ", company="Acme")
        )
        assert updated.full_name == "Cleo P."
        assert updated.company == "Acme"
        assert updated.role is Role.CLIENT

    async def test_update_own_requires_a_field(self, profiles: InMemoryProfileRepository) -> None:
        with pytest.raises(ValidationException):
            await ProfileService(profiles).update_own(CLIENT, ProfileUpdate())

    async def test_list_profiles_admin_only(self, profiles: InMemoryProfileRepository) -> None:
        svc = ProfileService(profiles)
        assert [p.id for p in await svc.list_profiles(ADMIN)] == [ADMIN.id, CLIENT.id]
        assert [p.id for p in await svc.list_profiles(ADMIN, Role.CLIENT)] == [CLIENT.id]
        with pytest.raises(AuthorizationException):
            await svc.list_profiles(CLIENT)

    async def test_change_role(self, profiles: InMemoryProfileRepository) -> None:
        svc = ProfileService(profiles)
        updated = await svc.change_role(ADMIN, CLIENT.id, Role.CREATIVE)
        assert updated.role is Role.CREATIVE
        assert profiles.profiles[CLIENT.id].role is Role.CREATIVE

    async def test_change_role_rules(self, profiles: InMemoryProfileRepository) -> None:
        svc = ProfileService(profiles)
        with pytest.raises(AuthorizationException):
            await svc.change_role(CLIENT, CLIENT.id, Role.ADMIN)
        with pytest.raises(ValidationException):
            await svc.change_role(ADMIN, CLIENT.id, Role.UNASSIGNED)
        with pytest.raises(ResourceNotFoundException):
            await svc.change_role(ADMIN, "nobody", Role.CLIENT)

    async def test_count_clients(self, profiles: InMemoryProfileRepository) -> None:
        assert await ProfileService(profiles).count_clients() == 1


class TestAuthService:
    async def test_sign_up_creates_client_profile(self) -> None:
        directory = IdentityDirectory()
        profiles = InMemoryProfileRepository()
        auth = AuthService(directory.provider(), profiles)

        result = await auth.sign_up("new@example.com", "long-enough-pw", "<b>Nia</b>")

        assert result.access_token is not None
        assert result.needs_confirmation is False
        profile = profiles.profiles[result.identity.id]
        assert profile.role is Role.CLIENT
        assert profile.full_name == "Nia"

    async def test_sign_up_duplicate_email(self) -> None:
        directory = IdentityDirectory()
        directory.add_account("taken@example.com")
        auth = AuthService(directory.provider(), InMemoryProfileRepository())
        with pytest.raises(EmailAlreadyRegisteredException):
            await auth.sign_up("taken@example.com", "long-enough-pw", None)

    async def test_sign_in_and_out(self) -> None:
        directory = IdentityDirectory()
        directory.add_account("a@example.com", "secret-pass")
        provider = directory.provider()
        auth = AuthService(provider, InMemoryProfileRepository())

        session = await auth.sign_in("a@example.com", "secret-pass")
        assert session.access_token in directory.sessions

        await auth.sign_out()
        assert session.access_token not in directory.sessions

    async def test_sign_in_bad_password(self) -> None:
        directory = IdentityDirectory()
        directory.add_account("a@example.com", "secret-pass")
        auth = AuthService(directory.provider(), InMemoryProfileRepository())
        with pytest.raises(AuthenticationException):
            await auth.sign_in("a@example.com", "wrong")

    async def test_refresh_without_session(self) -> None:
        auth = AuthService(IdentityDirectory().provider(), InMemoryProfileRepository())
        with pytest.raises(AuthenticationException):
            await auth.refresh()

    async def test_password_reset_flow(self) -> None:
        directory = IdentityDirectory()
        directory.add_account("a@example.com", "old-password")
        auth = AuthService(directory.provider(), InMemoryProfileRepository())

        await auth.request_password_reset("a@example.com")
        await auth.request_password_reset("nobody@example.com")
        await auth.reset_password("reset-a@example.com", "new-password")

        assert directory.accounts["a@example.com"][1] == "new-password"
        with pytest.raises(InvalidResetTokenException):
            await auth.reset_password("reset-a@example.com", "again-password")
