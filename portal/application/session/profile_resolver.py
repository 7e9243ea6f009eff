"""ProfileResolver: maps the current identity to its profile (and role).

Each identity change starts a new resolution tagged with a generation number.
Only the resolution whose generation is still current may publish; results
for an identity that has since changed are dropped. A None identity clears
the profile at once.
"""

import asyncio
import logging
from collections.abc import Callable

from portal.application.interfaces.repositories import IProfileRepository
from portal.application.session.session_store import SessionStore
from portal.domain.entities import Identity, Profile
from portal.domain.exceptions import PortalException

logger = logging.getLogger(__name__)


class ProfileResolver:
    """Keeps profile in step with a SessionStore's identity."""

    def __init__(self, profiles: IProfileRepository) -> None:
        self._profiles = profiles
        self._profile: Profile | None = None
        self._identity_id: str | None = None
        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self._settled = asyncio.Event()
        self._settled.set()
        self._error: BaseException | None = None
        # One lookup at a time: repositories share a single DB session.
        self._lookup_lock = asyncio.Lock()
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def profile(self) -> Profile | None:
        return self._profile

    @property
    def resolving(self) -> bool:
        return not self._settled.is_set()

    async def resolve(self, identity_id: str) -> Profile | None:
        """Fetch the profile for identity_id. Failures and missing rows give None."""
        try:
            async with self._lookup_lock:
                return await self._profiles.get_by_id(identity_id)
        except PortalException as e:
            logger.warning("Profile lookup failed for %s: %s", identity_id, e.message)
            return None

    def attach(self, store: SessionStore) -> None:
        """Follow the store's identity from now on (and pick up the current one)."""
        self._unsubscribe = store.subscribe(self.on_identity_change)
        if store.identity is not None:
            self.on_identity_change(store.identity)

    def on_identity_change(self, identity: Identity | None) -> None:
        """Start resolving for a new identity, or clear for None."""
        new_id = identity.id if identity is not None else None
        if new_id is not None and new_id == self._identity_id:
            return
        self._generation += 1
        self._identity_id = new_id
        self._profile = None
        self._error = None
        if new_id is None:
            self._settled.set()
            return
        self._settled.clear()
        self._task = asyncio.create_task(self._run(self._generation, new_id))

    async def _run(self, generation: int, identity_id: str) -> None:
        try:
            profile = await self.resolve(identity_id)
        except Exception as e:
            if generation != self._generation:
                logger.exception("Stale profile lookup for %s failed", identity_id)
                return
            self._error = e
            self._settled.set()
            return
        if generation != self._generation:
            logger.debug("Discarding stale profile result for %s", identity_id)
            return
        self._profile = profile
        self._settled.set()

    async def wait_settled(self, timeout: float) -> bool:
        """Wait for the current resolution. Returns False on timeout.

        Re-raises an unexpected error from the current resolution.
        """
        if not self._settled.is_set():
            try:
                await asyncio.wait_for(self._settled.wait(), timeout)
            except TimeoutError:
                return False
        if self._error is not None:
            raise self._error
        return True

    async def close(self) -> None:
        """Detach from the store and stop any in-flight lookup."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._generation += 1
        self._profile = None
        self._identity_id = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._settled.set()
