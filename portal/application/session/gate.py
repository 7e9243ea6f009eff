"""AuthorizationGate: decides whether a caller may enter a protected route.

decide() is pure; AuthorizationGate binds it to a live SessionStore and
ProfileResolver and adds the bounded wait for an unresolved session.
"""

import asyncio
from dataclasses import dataclass

from portal.application.dtos.session import Actor, SessionState
from portal.application.session.profile_resolver import ProfileResolver
from portal.application.session.session_store import SessionStore
from portal.domain.entities import Profile
from portal.domain.enums import AccessRequirement, Role

DEFAULT_SIGN_IN_PATH = "/auth"
DEFAULT_DASHBOARD_PATH = "/dashboard"


@dataclass(frozen=True)
class Admit:
    """Caller may proceed as actor."""

    actor: Actor


@dataclass(frozen=True)
class Pending:
    """Session or role still unknown; show a neutral waiting state."""


@dataclass(frozen=True)
class RedirectTo:
    """Caller must be sent elsewhere. reason is 'unauthenticated' or 'forbidden'."""

    path: str
    reason: str


Decision = Admit | Pending | RedirectTo

UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"


def decide(
    state: SessionState,
    profile: Profile | None,
    requirement: AccessRequirement,
    *,
    sign_in_path: str = DEFAULT_SIGN_IN_PATH,
    dashboard_path: str = DEFAULT_DASHBOARD_PATH,
) -> Decision:
    """Gate decision for one route.

    Pending wins while the session (or the identity's profile) is still
    being resolved, so nothing is admitted or redirected on a guess. With
    no identity the caller goes to sign-in. Admin routes admit only the
    admin role; everyone else goes to the dashboard.
    """
    if state.resolving or (state.identity is not None and state.profile_resolving):
        return Pending()
    if state.identity is None:
        return RedirectTo(path=sign_in_path, reason=UNAUTHENTICATED)
    actor = Actor.from_identity(state.identity, profile)
    if requirement is AccessRequirement.ADMIN and actor.role is not Role.ADMIN:
        return RedirectTo(path=dashboard_path, reason=FORBIDDEN)
    return Admit(actor=actor)


class AuthorizationGate:
    """Route guard over a live session for one browsing context."""

    def __init__(
        self,
        store: SessionStore,
        resolver: ProfileResolver,
        sign_in_path: str = DEFAULT_SIGN_IN_PATH,
        dashboard_path: str = DEFAULT_DASHBOARD_PATH,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.sign_in_path = sign_in_path
        self.dashboard_path = dashboard_path

    def state(self) -> SessionState:
        """Snapshot of the store and resolver."""
        return SessionState(
            identity=self.store.identity,
            resolving=self.store.resolving,
            profile_resolving=self.resolver.resolving,
        )

    def decide(self, requirement: AccessRequirement) -> Decision:
        return decide(
            self.state(),
            self.resolver.profile,
            requirement,
            sign_in_path=self.sign_in_path,
            dashboard_path=self.dashboard_path,
        )

    async def settle(self, timeout: float) -> bool:
        """Wait for session and profile to resolve, timeout in total. False on timeout."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        if not await self.store.wait_resolved(timeout):
            return False
        return await self.resolver.wait_settled(max(0.0, deadline - loop.time()))

    async def check(self, requirement: AccessRequirement, timeout: float) -> Decision:
        """Settle within timeout, then decide (Pending if still unresolved)."""
        await self.settle(timeout)
        return self.decide(requirement)
