"""Auth use cases: sign-up with profile creation, sign-in/out, refresh and reset."""

from __future__ import annotations

import logging

from portal.application.dtos.session import SignUpResult
from portal.application.interfaces.repositories import IProfileRepository
from portal.application.interfaces.services import IIdentityProvider
from portal.domain.entities import AuthSession
from portal.domain.enums import Role
from portal.shared.telemetry.tracing import traced
from portal.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


class AuthService:
    """Identity workflows. The provider and profile repo share one transaction."""

    def __init__(self, provider: IIdentityProvider, profiles: IProfileRepository) -> None:
        self.provider = provider
        self.profiles = profiles

    @traced("auth.sign_up")
    async def sign_up(self, email: str, password: str, full_name: str | None) -> SignUpResult:
        """Create the identity and its profile (role client)."""
        clean_name = InputSanitizer.sanitize_text(full_name)
        result = await self.provider.sign_up(
            email, password, {"full_name": clean_name}
        )
        await self.profiles.create_profile(
            result.identity.id, Role.CLIENT, full_name=clean_name
        )
        logger.info("Account created: %s", result.identity.id)
        return result

    @traced("auth.sign_in")
    async def sign_in(self, email: str, password: str) -> AuthSession:
        return await self.provider.sign_in(email, password)

    async def sign_out(self) -> None:
        await self.provider.sign_out()

    async def refresh(self) -> AuthSession:
        return await self.provider.refresh_session()

    async def request_password_reset(self, email: str) -> None:
        """Always succeeds from the caller's view; unknown emails are ignored."""
        await self.provider.request_password_reset(email)

    async def reset_password(self, token: str, new_password: str) -> None:
        await self.provider.reset_password(token, new_password)
