"""Base repository: generic get and create plus SQL error translation."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.exceptions import RemoteFailureException
from portal.infrastructure.persistence.database import Base


@asynccontextmanager
async def remote_call(operation: str) -> AsyncIterator[None]:
    """Translate SQLAlchemy errors raised inside the block into RemoteFailureException."""
    try:
        yield
    except SQLAlchemyError as e:
        raise RemoteFailureException(operation, type(e).__name__) from e


def remote_operation[**P, R](
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorate a repository method so no SQLAlchemyError escapes it.

    Every public repository method carries one; the base helpers below are
    only reached through them.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            async with remote_call(operation):
                return await func(*args, **kwargs)

        return wrapper

    return decorator


class BaseRepository[ModelType: Base]:
    """Base repository with get_record and add helpers.

    Subclasses map records to domain entities; records never leave the
    infrastructure layer.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_record(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and refresh server-generated columns."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
