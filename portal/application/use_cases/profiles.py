"""Profile use cases: own profile, admin listing and role changes."""

from __future__ import annotations

import logging

from portal.application.dtos.profile import ProfileUpdate
from portal.application.dtos.session import Actor
from portal.application.interfaces.repositories import IProfileRepository
from portal.domain.entities import Profile
from portal.domain.enums import Role
from portal.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile reads and writes. Owners edit their fields; admins change roles."""

    def __init__(self, profiles: IProfileRepository) -> None:
        self.profiles = profiles

    async def get_own(self, actor: Actor) -> Profile:
        profile = await self.profiles.get_by_id(actor.id)
        if profile is None:
            raise ResourceNotFoundException("profile", actor.id)
        return profile

    async def update_own(self, actor: Actor, data: ProfileUpdate) -> Profile:
        """Update the caller's own name, company or avatar."""
        if data.is_empty():
            raise ValidationException("No profile fields supplied")
        updated = await self.profiles.update_fields(
            actor.id,
            full_name=InputSanitizer.sanitize_text(data.full_name),
            company=InputSanitizer.sanitize_text(data.company),
            avatar_url=data.avatar_url.strip() if data.avatar_url else None,
        )
        if updated is None:
            raise ResourceNotFoundException("profile", actor.id)
        return updated

    async def list_profiles(self, actor: Actor, role: Role | None = None) -> list[Profile]:
        if not actor.is_admin:
            raise AuthorizationException(resource="profile", action="list")
        return await self.profiles.list_profiles(role)

    async def change_role(self, actor: Actor, profile_id: str, role: Role) -> Profile:
        """Admin-only role change. UNASSIGNED cannot be set explicitly."""
        if not actor.is_admin:
            raise AuthorizationException(resource="profile", action="change_role")
        if role is Role.UNASSIGNED:
            raise ValidationException(
                f"Role must be one of: {', '.join(Role.assignable())}", field="role"
            )
        updated = await self.profiles.set_role(profile_id, role)
        if updated is None:
            raise ResourceNotFoundException("profile", profile_id)
        logger.info("Role of %s set to %s by %s", profile_id, role.value, actor.id)
        return updated

    async def count_clients(self) -> int:
        return await self.profiles.count_by_role(Role.CLIENT)
