"""Identity and session domain entities.

An Identity is the authenticated principal issued by the identity provider.
An AuthSession is the provider's record of one signed-in browser session.
"""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.exceptions import ValidationException


@dataclass(frozen=True)
class Identity:
    """Authenticated principal (id + email). Lifetime is the provider session."""

    id: str
    email: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationException("Identity ID is required", field="id")
        if not self.email:
            raise ValidationException("Identity email is required", field="email")


@dataclass(frozen=True)
class AuthSession:
    """Provider session: the identity plus the token that proves it."""

    id: str
    identity: Identity
    access_token: str
    expires_at: datetime
