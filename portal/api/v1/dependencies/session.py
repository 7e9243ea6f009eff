"""Session dependencies: identity provider, per-request session context, route guard.

Each request gets its own SessionStore + ProfileResolver pair (one browsing
interaction). The resolver reads profiles through a separate read session so
its background lookups never share the request's transactional session.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Coroutine
from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.v1.dependencies.db import get_profile_repo
from portal.application.dtos.session import Actor
from portal.application.interfaces.repositories import IProfileRepository
from portal.application.interfaces.services import IIdentityProvider
from portal.application.session import (
    Admit,
    AuthorizationGate,
    Pending,
    ProfileResolver,
    SessionStore,
)
from portal.application.session.gate import UNAUTHENTICATED
from portal.application.use_cases.auth import AuthService
from portal.core.config import get_settings
from portal.domain.enums import AccessRequirement
from portal.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    SessionResolvingException,
)
from portal.infrastructure.identity import LocalIdentityProvider
from portal.infrastructure.persistence.database import get_db, get_db_transactional
from portal.infrastructure.persistence.repositories import (
    AccountRepository,
    AuthSessionRepository,
    PasswordResetTokenStore,
    ProfileRepository,
)
from portal.shared.context import set_current_identity

_http_bearer = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    return credentials.credentials if credentials else None


async def get_identity_provider(
    token: Annotated[str | None, Depends(get_bearer_token)],
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IIdentityProvider:
    """Identity provider bound to this request's bearer token (one instance per request)."""
    settings = get_settings()
    return LocalIdentityProvider(
        accounts=AccountRepository(db),
        sessions=AuthSessionRepository(db),
        reset_tokens=PasswordResetTokenStore(
            db, timedelta(minutes=settings.password_reset_expire_minutes)
        ),
        session_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        access_token=token,
    )


async def get_resolver_profiles(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IProfileRepository:
    """Profile lookups for the ProfileResolver (read-only session)."""
    return ProfileRepository(db)


async def get_auth_service(
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    profiles: Annotated[IProfileRepository, Depends(get_profile_repo)],
) -> AuthService:
    return AuthService(provider, profiles)


@dataclass
class SessionContext:
    """Live session state for one request."""

    store: SessionStore
    resolver: ProfileResolver
    gate: AuthorizationGate


async def get_session_context(
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    profiles: Annotated[IProfileRepository, Depends(get_resolver_profiles)],
) -> AsyncIterator[SessionContext]:
    """Start a SessionStore/ProfileResolver pair and tear it down after the request."""
    settings = get_settings()
    store = SessionStore(provider)
    resolver = ProfileResolver(profiles)
    resolver.attach(store)
    gate = AuthorizationGate(
        store,
        resolver,
        sign_in_path=settings.sign_in_path,
        dashboard_path=settings.dashboard_path,
    )
    await store.start()
    try:
        yield SessionContext(store=store, resolver=resolver, gate=gate)
    finally:
        store.close()
        await resolver.close()


def require(
    requirement: AccessRequirement,
) -> Callable[..., Coroutine[Any, Any, Actor]]:
    """Dependency factory: admit the caller for requirement or raise the mapped error.

    Pending after the bounded wait raises SessionResolvingException (503); a
    sign-in redirect raises AuthenticationException (401) and a dashboard
    redirect AuthorizationException (403), both carrying redirect_to.
    """

    async def _require(
        ctx: Annotated[SessionContext, Depends(get_session_context)],
    ) -> Actor:
        decision = await ctx.gate.check(
            requirement, get_settings().session_resolve_timeout_seconds
        )
        if isinstance(decision, Admit):
            set_current_identity(decision.actor.id)
            return decision.actor
        if isinstance(decision, Pending):
            raise SessionResolvingException()
        if decision.reason == UNAUTHENTICATED:
            raise AuthenticationException("Sign in required", redirect_to=decision.path)
        raise AuthorizationException(
            message="Admin role required", redirect_to=decision.path
        )

    return _require


require_authenticated = require(AccessRequirement.AUTHENTICATED)
require_admin = require(AccessRequirement.ADMIN)

CurrentActor = Annotated[Actor, Depends(require_authenticated)]
AdminActor = Annotated[Actor, Depends(require_admin)]
