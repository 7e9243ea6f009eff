"""Session API schemas: current session state and route gate decisions."""

from typing import Literal

from pydantic import BaseModel

from portal.domain.enums import Role
from portal.schemas.profile import ProfileResponse


class IdentityResponse(BaseModel):
    id: str
    email: str


class SessionResponse(BaseModel):
    """GET /session. identity is null when signed out."""

    resolving: bool
    identity: IdentityResponse | None = None
    profile: ProfileResponse | None = None
    role: Role | None = None


class GateDecisionResponse(BaseModel):
    """GET /session/gate. redirect_to is set only for decision == 'redirect'."""

    decision: Literal["admit", "pending", "redirect"]
    redirect_to: str | None = None
    reason: str | None = None
    role: Role | None = None
