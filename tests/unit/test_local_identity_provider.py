"""LocalIdentityProvider with mocked account, session and reset-token stores."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from portal.domain.exceptions import (
    AuthenticationException,
    InvalidResetTokenException,
    RemoteFailureException,
    ValidationException,
)
from portal.infrastructure.identity import LocalIdentityProvider
from portal.infrastructure.security.jwt import create_access_token

ACCOUNT = SimpleNamespace(id="acc-1", email="ada@example.com", is_active=True)


def _record(session_id: str = "sess-1", account_id: str = "acc-1") -> SimpleNamespace:
    return SimpleNamespace(
        id=session_id,
        account_id=account_id,
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )


@pytest.fixture
def stores():
    accounts = AsyncMock()
    sessions = AsyncMock()
    reset_tokens = AsyncMock()
    accounts.authenticate = AsyncMock(return_value=ACCOUNT)
    accounts.get_active = AsyncMock(return_value=ACCOUNT)
    accounts.create_account = AsyncMock(return_value=ACCOUNT)
    sessions.open = AsyncMock(return_value=_record())
    sessions.get_live = AsyncMock(return_value=_record())
    sessions.extend = AsyncMock(return_value=_record())
    return accounts, sessions, reset_tokens


def _provider(stores, token: str | None = None) -> LocalIdentityProvider:
    accounts, sessions, reset_tokens = stores
    return LocalIdentityProvider(
        accounts=accounts,
        sessions=sessions,
        reset_tokens=reset_tokens,
        session_ttl=timedelta(hours=1),
        access_token=token,
    )


def _token(session_id: str = "sess-1", account_id: str = "acc-1") -> str:
    return create_access_token(account_id, session_id, datetime.now(UTC) + timedelta(hours=1))


async def test_no_token_means_no_session(stores) -> None:
    assert await _provider(stores).get_current_session() is None
    stores[1].get_live.assert_not_awaited()


async def test_garbage_token_means_no_session(stores) -> None:
    assert await _provider(stores, "not-a-jwt").get_current_session() is None


async def test_valid_token_resolves_live_session(stores) -> None:
    token = _token()
    session = await _provider(stores, token).get_current_session()
    assert session.id == "sess-1"
    assert session.identity.email == "ada@example.com"
    assert session.access_token == token


async def test_revoked_session_means_no_session(stores) -> None:
    stores[1].get_live = AsyncMock(return_value=None)
    assert await _provider(stores, _token()).get_current_session() is None


async def test_token_for_other_account_rejected(stores) -> None:
    assert await _provider(stores, _token(account_id="acc-2")).get_current_session() is None


async def test_database_error_is_remote_failure(stores) -> None:
    stores[1].get_live = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
    with pytest.raises(RemoteFailureException) as exc_info:
        await _provider(stores, _token()).get_current_session()
    assert exc_info.value.details["operation"] == "session lookup"


async def test_sign_in_issues_token_and_emits(stores) -> None:
    provider = _provider(stores)
    events = []
    provider.on_session_change(events.append)

    session = await provider.sign_in("ada@example.com", "secret-pass")

    assert events == [session]
    assert (await provider.get_current_session()).id == session.id


async def test_sign_in_bad_credentials(stores) -> None:
    stores[0].authenticate = AsyncMock(return_value=None)
    provider = _provider(stores)
    events = []
    provider.on_session_change(events.append)
    with pytest.raises(AuthenticationException):
        await provider.sign_in("ada@example.com", "wrong")
    assert events == []
    stores[1].open.assert_not_awaited()


async def test_sign_up_checks_strength_first(stores) -> None:
    with pytest.raises(ValidationException):
        await _provider(stores).sign_up("ada@example.com", "short", {})
    stores[0].create_account.assert_not_awaited()


async def test_sign_up_signs_in(stores) -> None:
    result = await _provider(stores).sign_up("ada@example.com", "long-enough", {"full_name": "Ada"})
    assert result.identity.id == "acc-1"
    assert result.access_token


async def test_sign_out_revokes_and_emits_none(stores) -> None:
    provider = _provider(stores, _token())
    events = []
    provider.on_session_change(events.append)

    await provider.sign_out()

    stores[1].revoke.assert_awaited_once_with("sess-1")
    assert events == [None]
    assert await provider.get_current_session() is None


async def test_sign_out_without_session_is_noop(stores) -> None:
    await _provider(stores).sign_out()
    stores[1].revoke.assert_not_awaited()


async def test_refresh_extends_session(stores) -> None:
    provider = _provider(stores, _token())
    session = await provider.refresh_session()
    stores[1].extend.assert_awaited_once()
    assert session.id == "sess-1"


async def test_refresh_without_session(stores) -> None:
    with pytest.raises(AuthenticationException):
        await _provider(stores).refresh_session()


async def test_unsubscribe(stores) -> None:
    provider = _provider(stores)
    events = []
    unsubscribe = provider.on_session_change(events.append)
    unsubscribe()
    await provider.sign_in("ada@example.com", "secret-pass")
    assert events == []


async def test_password_reset_request_unknown_email_is_silent(stores) -> None:
    stores[0].get_by_email = AsyncMock(return_value=None)
    await _provider(stores).request_password_reset("nobody@example.com")
    stores[2].create.assert_not_awaited()


async def test_password_reset_request_issues_token(stores) -> None:
    stores[0].get_by_email = AsyncMock(return_value=ACCOUNT)
    stores[2].create = AsyncMock(return_value=("raw-token", datetime.now(UTC)))
    await _provider(stores).request_password_reset("ada@example.com")
    stores[2].create.assert_awaited_once_with("acc-1")


async def test_reset_password_revokes_all_sessions(stores) -> None:
    stores[2].redeem = AsyncMock(return_value="acc-1")
    await _provider(stores).reset_password("raw-token", "brand-new-pass")
    stores[0].set_password.assert_awaited_once_with("acc-1", "brand-new-pass")
    stores[1].revoke_all.assert_awaited_once_with("acc-1")


async def test_reset_password_invalid_token(stores) -> None:
    stores[2].redeem = AsyncMock(return_value=None)
    with pytest.raises(InvalidResetTokenException):
        await _provider(stores).reset_password("used", "brand-new-pass")
    stores[0].set_password.assert_not_awaited()
