"""Account, session and reset token stores backing the local identity provider."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.exceptions import EmailAlreadyRegisteredException
from portal.infrastructure.persistence.models.account import (
    Account,
    AuthSessionRecord,
    PasswordResetToken,
)
from portal.infrastructure.persistence.repositories.base import BaseRepository, remote_operation
from portal.infrastructure.security.password import get_password_hash, verify_password
from portal.shared.utils.datetime import utc_now
from portal.shared.utils.generators import generate_token, hash_token

# Lazy dummy hash for constant-time comparison when the email is unknown.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRepository(BaseRepository[Account]):
    """Accounts: lookup, creation, password checks and changes."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Account)

    @remote_operation("account lookup")
    async def get_by_email(self, email: str) -> Account | None:
        result = await self.db.execute(
            select(Account).where(Account.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    @remote_operation("account lookup")
    async def get_active(self, account_id: str) -> Account | None:
        account = await self.get_record(account_id)
        if account is None or not account.is_active:
            return None
        return account

    @remote_operation("account insert")
    async def create_account(self, email: str, password: str) -> Account:
        """Create an account; raises EmailAlreadyRegisteredException on duplicates."""
        if await self.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredException()
        hashed = await asyncio.to_thread(get_password_hash, password)
        account = Account(email=normalize_email(email), hashed_password=hashed)
        try:
            async with self.db.begin_nested():
                self.db.add(account)
                await self.db.flush()
        except IntegrityError:
            raise EmailAlreadyRegisteredException() from None
        await self.db.refresh(account)
        return account

    @remote_operation("account sign in")
    async def authenticate(self, email: str, password: str) -> Account | None:
        """Return the active account when the password matches, else None."""
        account = await self.get_by_email(email)
        if account is None:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not account.is_active:
            return None
        if not await asyncio.to_thread(verify_password, password, account.hashed_password):
            return None
        return account

    @remote_operation("password change")
    async def set_password(self, account_id: str, password: str) -> bool:
        account = await self.get_record(account_id)
        if account is None:
            return False
        account.hashed_password = await asyncio.to_thread(get_password_hash, password)
        await self.db.flush()
        return True


class AuthSessionRepository(BaseRepository[AuthSessionRecord]):
    """Browser sessions: open, validate, extend and revoke."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AuthSessionRecord)

    @remote_operation("session open")
    async def open(self, account_id: str, ttl: timedelta) -> AuthSessionRecord:
        return await self.add(
            AuthSessionRecord(account_id=account_id, expires_at=utc_now() + ttl)
        )

    @remote_operation("session lookup")
    async def get_live(self, session_id: str, now: datetime | None = None) -> AuthSessionRecord | None:
        """Return the session if it exists, is not revoked and has not expired."""
        now = now or utc_now()
        result = await self.db.execute(
            select(AuthSessionRecord)
            .where(AuthSessionRecord.id == session_id)
            .where(AuthSessionRecord.revoked_at.is_(None))
            .where(AuthSessionRecord.expires_at > now)
        )
        return result.scalar_one_or_none()

    @remote_operation("session refresh")
    async def extend(self, record: AuthSessionRecord, ttl: timedelta) -> AuthSessionRecord:
        now = utc_now()
        record.refreshed_at = now
        record.expires_at = now + ttl
        await self.db.flush()
        return record

    @remote_operation("session revoke")
    async def revoke(self, session_id: str) -> None:
        await self.db.execute(
            update(AuthSessionRecord)
            .where(AuthSessionRecord.id == session_id)
            .where(AuthSessionRecord.revoked_at.is_(None))
            .values(revoked_at=utc_now())
        )

    @remote_operation("session revoke")
    async def revoke_all(self, account_id: str) -> None:
        """Revoke every open session of an account (after a password reset)."""
        await self.db.execute(
            update(AuthSessionRecord)
            .where(AuthSessionRecord.account_id == account_id)
            .where(AuthSessionRecord.revoked_at.is_(None))
            .values(revoked_at=utc_now())
        )


class PasswordResetTokenStore:
    """Create and redeem one-time password reset tokens."""

    def __init__(self, db: AsyncSession, ttl: timedelta) -> None:
        self._db = db
        self._ttl = ttl

    @remote_operation("reset token insert")
    async def create(self, account_id: str) -> tuple[str, datetime]:
        """Create a token for account; return (raw_token, expires_at)."""
        raw = generate_token()
        expires_at = utc_now() + self._ttl
        self._db.add(
            PasswordResetToken(
                account_id=account_id,
                token_hash=hash_token(raw),
                expires_at=expires_at,
            )
        )
        await self._db.flush()
        return raw, expires_at

    @remote_operation("reset token redeem")
    async def redeem(self, token: str) -> str | None:
        """If token is valid and unused, mark it used and return the account id."""
        now = utc_now()
        result = await self._db.execute(
            select(PasswordResetToken)
            .where(PasswordResetToken.token_hash == hash_token(token))
            .where(PasswordResetToken.used_at.is_(None))
            .where(PasswordResetToken.expires_at > now)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        row.used_at = now
        await self._db.flush()
        return row.account_id
