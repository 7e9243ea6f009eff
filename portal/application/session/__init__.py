"""Session state: SessionStore, ProfileResolver and the AuthorizationGate."""

from portal.application.session.gate import (
    Admit,
    AuthorizationGate,
    Decision,
    Pending,
    RedirectTo,
    decide,
)
from portal.application.session.profile_resolver import ProfileResolver
from portal.application.session.session_store import SessionStore

__all__ = [
    "Admit",
    "AuthorizationGate",
    "Decision",
    "Pending",
    "ProfileResolver",
    "RedirectTo",
    "SessionStore",
    "decide",
]
