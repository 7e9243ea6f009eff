"""DTOs for session state and the acting principal."""

from dataclasses import dataclass

from portal.domain.entities import Identity, Profile
from portal.domain.enums import Role


@dataclass(frozen=True)
class Actor:
    """The admitted caller: identity plus the role its profile resolved to.

    An identity whose profile is missing acts with Role.UNASSIGNED.
    """

    id: str
    email: str
    role: Role
    full_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_identity(cls, identity: Identity, profile: Profile | None) -> "Actor":
        if profile is None or profile.id != identity.id:
            return cls(id=identity.id, email=identity.email, role=Role.UNASSIGNED)
        return cls(
            id=identity.id,
            email=identity.email,
            role=profile.role,
            full_name=profile.full_name,
        )


@dataclass(frozen=True)
class SessionState:
    """Point-in-time view of the session used by the route guard.

    resolving: the initial session query has not answered yet.
    profile_resolving: an identity is known but its profile lookup is in flight.
    """

    identity: Identity | None
    resolving: bool
    profile_resolving: bool = False


@dataclass(frozen=True)
class SignUpResult:
    """Outcome of sign-up. access_token is None while email confirmation is pending."""

    identity: Identity
    access_token: str | None

    @property
    def needs_confirmation(self) -> bool:
        return self.access_token is None
