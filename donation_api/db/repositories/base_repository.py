"""
Base repository - generic async CRUD over one mapped model.
Driver failures are logged and re-raised as ``StorageError`` so callers see a single error kind.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from donation_api.core.exceptions import StorageError
from donation_api.db.base import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
R = TypeVar("R")


def storage_errors(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
    """Wrap a repository coroutine so SQLAlchemy failures surface as StorageError."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> R:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error("storage failure in %s: %s", func.__qualname__, exc)
            raise StorageError("Storage is unavailable, try again later.") from exc

    return wrapper


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses add model-specific queries."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    @storage_errors
    async def get_by_id(self, id: Any) -> ModelType | None:
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    @storage_errors
    async def add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits via commit()."""
        self.session.add(entity)
        await self.session.flush()  # Assigns defaults and ids without committing
        await self.session.refresh(entity)
        return entity

    @storage_errors
    async def save(self, entity: ModelType) -> ModelType:
        """Flush in-place mutations of an already loaded entity."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    @storage_errors
    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)
        await self.session.flush()

    @storage_errors
    async def commit(self) -> None:
        """Commit the unit of work. Must run before the caller reports success."""
        await self.session.commit()
