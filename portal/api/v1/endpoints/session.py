"""Session API: what the SessionStore and ProfileResolver know about the caller.

Both routes are public. A client shell polls GET /session to render its
signed-in state and asks GET /session/gate before showing a protected page.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from portal.api.v1.dependencies import SessionContext, get_session_context
from portal.application.session import Admit, Pending
from portal.core.config import get_settings
from portal.domain.enums import AccessRequirement
from portal.schemas.profile import ProfileResponse
from portal.schemas.session import (
    GateDecisionResponse,
    IdentityResponse,
    SessionResponse,
)

router = APIRouter()

Ctx = Annotated[SessionContext, Depends(get_session_context)]


@router.get("", response_model=SessionResponse)
async def get_session(ctx: Ctx):
    """Current identity, profile and role once resolved (bounded wait)."""
    await ctx.gate.settle(get_settings().session_resolve_timeout_seconds)
    state = ctx.gate.state()
    identity = state.identity
    profile = ctx.resolver.profile if identity is not None else None
    return SessionResponse(
        resolving=state.resolving or state.profile_resolving,
        identity=IdentityResponse(id=identity.id, email=identity.email) if identity else None,
        profile=ProfileResponse.model_validate(profile) if profile else None,
        role=profile.role if profile else None,
    )


@router.get("/gate", response_model=GateDecisionResponse)
async def check_gate(
    ctx: Ctx,
    requirement: AccessRequirement = Query(AccessRequirement.AUTHENTICATED),
):
    """Gate decision for a route with the given requirement."""
    decision = await ctx.gate.check(
        requirement, get_settings().session_resolve_timeout_seconds
    )
    if isinstance(decision, Admit):
        return GateDecisionResponse(decision="admit", role=decision.actor.role)
    if isinstance(decision, Pending):
        return GateDecisionResponse(decision="pending")
    return GateDecisionResponse(
        decision="redirect", redirect_to=decision.path, reason=decision.reason
    )
