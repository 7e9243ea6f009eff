"""SessionStore: the single observable source of the current identity.

Subscribes to the identity provider before asking it for the current session,
so an event that lands while the initial query is in flight is never lost:
the event wins and the late query result is dropped. Every change is
republished synchronously to subscribers in the order it was received.
"""

import asyncio
import logging
from collections.abc import Callable

from portal.application.interfaces.services import IIdentityProvider
from portal.domain.entities import AuthSession, Identity
from portal.domain.exceptions import RemoteFailureException

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], None]


class SessionStore:
    """Holds (identity, session, resolving) for one browsing context.

    resolving is True from construction until the first answer (initial query
    or provider event). A provider failure during the initial query leaves it
    True; callers bound their wait with wait_resolved(timeout).
    """

    def __init__(self, provider: IIdentityProvider) -> None:
        self._provider = provider
        self._session: AuthSession | None = None
        self._resolving = True
        self._version = 0
        self._closed = False
        self._listeners: list[IdentityListener] = []
        self._unsubscribe_provider: Callable[[], None] | None = None
        self._resolved = asyncio.Event()

    @property
    def identity(self) -> Identity | None:
        return self._session.identity if self._session is not None else None

    @property
    def session(self) -> AuthSession | None:
        return self._session

    @property
    def resolving(self) -> bool:
        return self._resolving

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener for identity changes; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        """Subscribe to provider events, then run the one-off initial session query."""
        if self._unsubscribe_provider is not None:
            return
        self._unsubscribe_provider = self._provider.on_session_change(
            self._on_provider_change
        )
        version = self._version
        try:
            session = await self._provider.get_current_session()
        except RemoteFailureException as e:
            logger.warning("Initial session query failed; session stays unresolved: %s", e)
            return
        if self._closed:
            return
        if self._version != version:
            logger.debug("Initial session result superseded by a provider event")
            return
        self._apply(session)

    async def wait_resolved(self, timeout: float) -> bool:
        """Wait up to timeout seconds for the first answer. Returns False on timeout."""
        if not self._resolving:
            return True
        try:
            await asyncio.wait_for(self._resolved.wait(), timeout)
        except TimeoutError:
            return False
        return True

    def close(self) -> None:
        """Unsubscribe from the provider and drop the identity (publishes None)."""
        if self._closed:
            return
        self._closed = True
        if self._unsubscribe_provider is not None:
            self._unsubscribe_provider()
            self._unsubscribe_provider = None
        had_identity = self._session is not None
        self._session = None
        if had_identity:
            self._publish(None)
        self._listeners.clear()

    def _on_provider_change(self, session: AuthSession | None) -> None:
        if self._closed:
            return
        self._version += 1
        self._apply(session)

    def _apply(self, session: AuthSession | None) -> None:
        self._session = session
        if self._resolving:
            self._resolving = False
            self._resolved.set()
        self._publish(self.identity)

    def _publish(self, identity: Identity | None) -> None:
        for listener in list(self._listeners):
            listener(identity)
