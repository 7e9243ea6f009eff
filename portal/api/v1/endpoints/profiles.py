"""Profile API: own profile for everyone signed in, listing and roles for admins."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from portal.api.v1.dependencies import AdminActor, CurrentActor, get_profile_service
from portal.application.dtos.profile import ProfileUpdate
from portal.application.use_cases.profiles import ProfileService
from portal.core.limiter import limit_writes
from portal.domain.enums import Role
from portal.schemas.profile import (
    ProfileResponse,
    ProfileUpdateRequest,
    RoleChangeRequest,
)

router = APIRouter()

ProfileSvc = Annotated[ProfileService, Depends(get_profile_service)]


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(actor: CurrentActor, profiles: ProfileSvc):
    return ProfileResponse.model_validate(await profiles.get_own(actor))


@router.patch("/me", response_model=ProfileResponse)
@limit_writes
async def update_my_profile(
    request: Request,
    body: ProfileUpdateRequest,
    actor: CurrentActor,
    profiles: ProfileSvc,
):
    """Update name, company or avatar. Role is not editable here."""
    updated = await profiles.update_own(actor, ProfileUpdate(**body.model_dump()))
    return ProfileResponse.model_validate(updated)


@router.get("", response_model=list[ProfileResponse])
async def list_profiles(
    actor: AdminActor,
    profiles: ProfileSvc,
    role: Role | None = Query(None, description="Only profiles with this role"),
):
    return [ProfileResponse.model_validate(p) for p in await profiles.list_profiles(actor, role)]


@router.patch("/{profile_id}/role", response_model=ProfileResponse)
@limit_writes
async def change_role(
    request: Request,
    profile_id: str,
    body: RoleChangeRequest,
    actor: AdminActor,
    profiles: ProfileSvc,
):
    """Set a profile's role (client, creative or admin)."""
    updated = await profiles.change_role(actor, profile_id, body.role)
    return ProfileResponse.model_validate(updated)
