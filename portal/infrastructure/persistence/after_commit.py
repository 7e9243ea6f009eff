"""Post-commit actions for the request transaction (IAfterCommit).

get_db_transactional attaches one AfterCommit to each write session and runs
it after the transaction has committed. Removing stored objects and dropping
cached views happens here, so a rolled-back delete never loses an object a
row still points at.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from portal.application.interfaces.services import AfterCommitAction

logger = logging.getLogger(__name__)

SESSION_INFO_KEY = "after_commit"


class AfterCommit:
    """FIFO queue of async actions; run() drains it once."""

    def __init__(self) -> None:
        self._actions: list[AfterCommitAction] = []

    def __len__(self) -> int:
        return len(self._actions)

    def add(self, action: AfterCommitAction) -> None:
        self._actions.append(action)

    async def run(self) -> None:
        """Run queued actions in order.

        The data change is already durable, so a failing action is logged
        and the rest still run.
        """
        actions, self._actions = self._actions, []
        for action in actions:
            try:
                await action()
            except Exception:
                logger.exception(
                    "Post-commit action %s failed",
                    getattr(action, "__qualname__", repr(action)),
                )


def after_commit_for(session: AsyncSession) -> AfterCommit:
    """The queue attached to session, created on first use."""
    hooks = session.info.get(SESSION_INFO_KEY)
    if hooks is None:
        hooks = session.info[SESSION_INFO_KEY] = AfterCommit()
    return hooks
