"""Profile repository (IProfileRepository)."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.entities import Profile
from portal.domain.enums import Role
from portal.infrastructure.persistence.models.profile import ProfileRecord
from portal.infrastructure.persistence.repositories.base import BaseRepository, remote_operation
from portal.shared.utils.datetime import ensure_utc


def profile_to_entity(record: ProfileRecord) -> Profile:
    """Map ORM ProfileRecord to the domain Profile (unknown roles become unassigned)."""
    return Profile(
        id=record.id,
        role=Role.parse(record.role),
        full_name=record.full_name,
        company=record.company,
        avatar_url=record.avatar_url,
        created_at=ensure_utc(record.created_at),
        updated_at=ensure_utc(record.updated_at),
    )


class ProfileRepository(BaseRepository[ProfileRecord]):
    """Profiles keyed by account id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ProfileRecord)

    @remote_operation("profile lookup")
    async def get_by_id(self, profile_id: str) -> Profile | None:
        record = await self.get_record(profile_id)
        return profile_to_entity(record) if record else None

    @remote_operation("profile insert")
    async def create_profile(
        self,
        profile_id: str,
        role: Role,
        full_name: str | None = None,
        company: str | None = None,
    ) -> Profile:
        record = await self.add(
            ProfileRecord(
                id=profile_id, role=role.value, full_name=full_name, company=company
            )
        )
        return profile_to_entity(record)

    @remote_operation("profile update")
    async def update_fields(
        self,
        profile_id: str,
        full_name: str | None = None,
        company: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile | None:
        record = await self.get_record(profile_id)
        if record is None:
            return None
        if full_name is not None:
            record.full_name = full_name
        if company is not None:
            record.company = company
        if avatar_url is not None:
            record.avatar_url = avatar_url
        await self.db.flush()
        await self.db.refresh(record)
        return profile_to_entity(record)

    @remote_operation("role change")
    async def set_role(self, profile_id: str, role: Role) -> Profile | None:
        record = await self.get_record(profile_id)
        if record is None:
            return None
        record.role = role.value
        await self.db.flush()
        await self.db.refresh(record)
        return profile_to_entity(record)

    @remote_operation("profile listing")
    async def list_profiles(self, role: Role | None = None) -> list[Profile]:
        stmt = select(ProfileRecord).order_by(ProfileRecord.created_at.desc())
        if role is not None:
            stmt = stmt.where(ProfileRecord.role == role.value)
        result = await self.db.execute(stmt)
        return [profile_to_entity(r) for r in result.scalars().all()]

    @remote_operation("profile counts")
    async def count_by_role(self, role: Role) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(ProfileRecord).where(ProfileRecord.role == role.value)
        )
        return int(result.scalar_one())
