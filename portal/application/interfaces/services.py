"""Service interfaces (ports): identity provider, cache, object storage, post-commit hooks."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from portal.application.dtos.session import SignUpResult
    from portal.domain.entities import AuthSession

SessionCallback = Callable[["AuthSession | None"], None]


class IIdentityProvider(Protocol):
    """Identity provider contract.

    Change events are delivered synchronously and in emission order to every
    registered callback. Failures surface as RemoteFailureException; bad
    credentials as AuthenticationException.
    """

    async def get_current_session(self) -> AuthSession | None:
        """Return the session carried by this client, or None."""

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Register a change callback; returns a function that unregisters it."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Authenticate with email and password."""

    async def sign_up(
        self, email: str, password: str, attrs: dict[str, Any]
    ) -> SignUpResult:
        """Create an identity. attrs carries display attributes (full_name)."""

    async def sign_out(self) -> None:
        """End the current session."""

    async def refresh_session(self) -> AuthSession:
        """Extend the current session and return it with a fresh token."""

    async def request_password_reset(self, email: str) -> None:
        """Start a reset for the email if it is registered; silent otherwise."""

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token."""


class ICacheService(Protocol):
    """Protocol for the key/value cache (Redis or absent)."""

    def is_available(self) -> bool:
        """Return True if the cache can be used."""

    async def get(self, key: str) -> Any | None:
        """Return the cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching the pattern; returns count."""


AfterCommitAction = Callable[[], Awaitable[object]]


class IAfterCommit(Protocol):
    """Queue of actions that must only run once the current transaction commits.

    Nothing queued runs if the transaction rolls back.
    """

    def add(self, action: AfterCommitAction) -> None:
        """Queue action."""


class IStorageService(Protocol):
    """Protocol for object storage backends (local, S3-compatible)."""

    async def upload(
        self,
        file_data: bytes,
        storage_ref: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes under storage_ref."""

    def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream the object's content."""

    async def delete(self, storage_ref: str) -> bool:
        """Delete the object. Returns False if it did not exist."""

    async def exists(self, storage_ref: str) -> bool:
        """Return True if the object exists."""

    def public_url(self, storage_ref: str) -> str:
        """URL recorded on the file row for the object."""
