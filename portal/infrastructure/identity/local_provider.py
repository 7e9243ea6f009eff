"""Database-backed identity provider.

Accounts, sessions and reset tokens live in Postgres; the browser holds a
JWT naming its auth_session row. One provider instance serves one client
(one request), so "current session" is whatever token that client presented
or was issued during the request.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from portal.application.dtos.session import SignUpResult
from portal.application.interfaces.services import SessionCallback
from portal.domain.entities import AuthSession, Identity
from portal.domain.exceptions import (
    AuthenticationException,
    InvalidResetTokenException,
    RemoteFailureException,
)
from portal.infrastructure.persistence.models.account import Account, AuthSessionRecord
from portal.infrastructure.persistence.repositories.account_repo import (
    AccountRepository,
    AuthSessionRepository,
    PasswordResetTokenStore,
)
from portal.infrastructure.security.jwt import create_access_token, verify_token
from portal.infrastructure.security.password import check_password_strength
from portal.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _identity_call(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise RemoteFailureException(operation, type(e).__name__) from e


class LocalIdentityProvider:
    """IIdentityProvider over the account/auth_session/password_reset_token tables."""

    def __init__(
        self,
        accounts: AccountRepository,
        sessions: AuthSessionRepository,
        reset_tokens: PasswordResetTokenStore,
        session_ttl: timedelta,
        access_token: str | None = None,
    ) -> None:
        self.accounts = accounts
        self.sessions = sessions
        self.reset_tokens = reset_tokens
        self.session_ttl = session_ttl
        self._token = access_token
        self._listeners: list[SessionCallback] = []

    # -- change events -------------------------------------------------------

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, session: AuthSession | None) -> None:
        for callback in list(self._listeners):
            callback(session)

    def _issue(self, account: Account, record: AuthSessionRecord) -> AuthSession:
        expires_at = ensure_utc(record.expires_at)
        assert expires_at is not None
        token = create_access_token(account.id, record.id, expires_at)
        self._token = token
        return AuthSession(
            id=record.id,
            identity=Identity(id=account.id, email=account.email),
            access_token=token,
            expires_at=expires_at,
        )

    # -- queries -------------------------------------------------------------

    async def get_current_session(self) -> AuthSession | None:
        """Return the live session for the presented token, or None."""
        if not self._token:
            return None
        try:
            claims = verify_token(self._token)
        except ValueError as e:
            logger.debug("Rejected access token: %s", e)
            return None
        async with _identity_call("session lookup"):
            record = await self.sessions.get_live(claims.session_id)
            if record is None or record.account_id != claims.identity_id:
                return None
            account = await self.accounts.get_active(record.account_id)
        if account is None:
            return None
        expires_at = ensure_utc(record.expires_at)
        assert expires_at is not None
        return AuthSession(
            id=record.id,
            identity=Identity(id=account.id, email=account.email),
            access_token=self._token,
            expires_at=expires_at,
        )

    # -- commands ------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> AuthSession:
        async with _identity_call("sign in"):
            account = await self.accounts.authenticate(email, password)
            if account is None:
                raise AuthenticationException("Invalid email or password")
            record = await self.sessions.open(account.id, self.session_ttl)
        session = self._issue(account, record)
        logger.info("Signed in: %s (session %s)", account.id, record.id)
        self._emit(session)
        return session

    async def sign_up(self, email: str, password: str, attrs: dict[str, Any]) -> SignUpResult:
        """Create the account and sign it in; no email confirmation step."""
        check_password_strength(password)
        async with _identity_call("sign up"):
            account = await self.accounts.create_account(email, password)
            record = await self.sessions.open(account.id, self.session_ttl)
        session = self._issue(account, record)
        logger.debug("Sign-up attributes for %s: %s", account.id, sorted(attrs))
        self._emit(session)
        return SignUpResult(identity=session.identity, access_token=session.access_token)

    async def sign_out(self) -> None:
        current = await self.get_current_session()
        if current is None:
            return
        async with _identity_call("sign out"):
            await self.sessions.revoke(current.id)
        self._token = None
        logger.info("Signed out: %s (session %s)", current.identity.id, current.id)
        self._emit(None)

    async def refresh_session(self) -> AuthSession:
        current = await self.get_current_session()
        if current is None:
            raise AuthenticationException("No active session to refresh")
        async with _identity_call("refresh session"):
            record = await self.sessions.get_live(current.id)
            account = await self.accounts.get_active(current.identity.id)
            if record is None or account is None:
                raise AuthenticationException("Session is no longer active")
            record = await self.sessions.extend(record, self.session_ttl)
        session = self._issue(account, record)
        self._emit(session)
        return session

    async def request_password_reset(self, email: str) -> None:
        async with _identity_call("password reset request"):
            account = await self.accounts.get_by_email(email)
            if account is None or not account.is_active:
                logger.debug("Password reset requested for an unknown email")
                return
            token, expires_at = await self.reset_tokens.create(account.id)
        logger.info(
            "Password reset token issued for %s (expires %s)",
            account.id,
            expires_at.isoformat(),
        )
        logger.debug("Reset token for %s: %s", account.id, token)

    async def reset_password(self, token: str, new_password: str) -> None:
        check_password_strength(new_password)
        async with _identity_call("password reset"):
            account_id = await self.reset_tokens.redeem(token)
            if account_id is None:
                raise InvalidResetTokenException()
            await self.accounts.set_password(account_id, new_password)
            await self.sessions.revoke_all(account_id)
        logger.info("Password reset completed for %s", account_id)
