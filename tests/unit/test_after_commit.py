"""Post-commit queue: runs only after get_db_transactional commits."""

import pytest
from sqlalchemy.exc import OperationalError

from portal.infrastructure.persistence import database
from portal.infrastructure.persistence.after_commit import AfterCommit, after_commit_for


class _Transaction:
    def __init__(self, session: "_Session") -> None:
        self.session = session

    async def __aenter__(self) -> "_Transaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            if self.session.commit_fails:
                raise OperationalError("COMMIT", {}, Exception("connection lost"))
            self.session.committed = True
        return False


class _Session:
    def __init__(self, commit_fails: bool = False) -> None:
        self.info: dict = {}
        self.commit_fails = commit_fails
        self.committed = False

    async def __aenter__(self) -> "_Session":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    def begin(self) -> _Transaction:
        return _Transaction(self)


@pytest.fixture
def sessions(monkeypatch):
    made: list[_Session] = []

    def factory(commit_fails: bool = False):
        def make() -> _Session:
            made.append(_Session(commit_fails))
            return made[-1]

        monkeypatch.setattr(database, "AsyncSessionLocal", make)
        return made

    return factory


async def test_actions_run_after_commit(sessions) -> None:
    made = sessions()
    ran: list[bool] = []
    gen = database.get_db_transactional()
    session = await gen.__anext__()

    async def remove_object() -> None:
        ran.append(made[0].committed)

    after_commit_for(session).add(remove_object)
    with pytest.raises(StopAsyncIteration):
        await gen.__anext__()

    assert ran == [True]


async def test_failed_commit_skips_actions(sessions) -> None:
    sessions(commit_fails=True)
    ran: list[str] = []
    gen = database.get_db_transactional()
    session = await gen.__anext__()

    async def remove_object() -> None:
        ran.append("removed")

    after_commit_for(session).add(remove_object)
    with pytest.raises(OperationalError):
        await gen.__anext__()

    assert ran == []


async def test_failed_request_skips_actions(sessions) -> None:
    sessions()
    ran: list[str] = []
    gen = database.get_db_transactional()
    session = await gen.__anext__()

    async def remove_object() -> None:
        ran.append("removed")

    after_commit_for(session).add(remove_object)
    with pytest.raises(RuntimeError):
        await gen.athrow(RuntimeError("handler failed"))

    assert ran == []


async def test_one_failing_action_does_not_stop_the_rest() -> None:
    hooks = AfterCommit()
    ran: list[str] = []

    async def broken() -> None:
        raise OSError("disk gone")

    async def invalidate() -> None:
        ran.append("invalidated")

    hooks.add(broken)
    hooks.add(invalidate)
    await hooks.run()

    assert ran == ["invalidated"]
    assert len(hooks) == 0


def test_queue_is_per_session() -> None:
    first, second = _Session(), _Session()
    assert after_commit_for(first) is after_commit_for(first)
    assert after_commit_for(first) is not after_commit_for(second)
