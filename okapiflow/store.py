"""Entity store adapter: single point of engine access for one collection.

Every operation opens its own session and transaction, so one adapter call
is one atomic store operation and nothing more. Repositories compose these
calls; nothing above the repository layer touches a session.

Boundary rules:
  - Works on ORM rows only; translation to domain models is the
    repository's job.
  - Never swallows engine errors: they are logged with the collection name
    and re-raised unchanged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import InstrumentedAttribute

from okapiflow.db.database import Base

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=Base)


def as_utc(value: datetime | str | None) -> datetime | None:
    """Coerce an engine-native timestamp back to an aware UTC datetime.

    SQLite hands back naive datetimes (or ISO strings from raw JSON), which
    are interpreted as UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EntityStore(Generic[RowT]):
    """CRUD over one collection, keyed by ``id`` and indexed by ``space_id``."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        row_type: type[RowT],
    ) -> None:
        self._session_factory = session_factory
        self._row_type = row_type

    @property
    def collection(self) -> str:
        return str(self._row_type.__tablename__)

    def _index_column(self) -> InstrumentedAttribute[Any]:
        column = getattr(self._row_type, "space_id", None)
        if column is None:
            raise TypeError(f"Collection {self.collection} has no space_id index")
        return column

    async def get(self, key: str) -> RowT | None:
        """Return the row stored under ``key``, or None."""
        try:
            async with self._session_factory() as session:
                return await session.get(self._row_type, key)
        except SQLAlchemyError:
            logger.exception(f"Error getting item {key} from {self.collection}")
            raise

    async def get_all(self) -> list[RowT]:
        """Return every row in the collection."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(self._row_type))
                return list(result.scalars().all())
        except SQLAlchemyError:
            logger.exception(f"Error getting all items from {self.collection}")
            raise

    async def get_all_by_index(
        self,
        space_id: str,
        order_by: Any = None,
    ) -> list[RowT]:
        """Return every row whose ``space_id`` matches, optionally ordered."""
        stmt = select(self._row_type).where(self._index_column() == space_id)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError:
            logger.exception(
                f"Error getting items by space_id {space_id} from {self.collection}"
            )
            raise

    async def put(self, row: RowT) -> RowT:
        """Insert or replace ``row`` by primary key (last write wins)."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    merged = await session.merge(row)
                return merged
        except SQLAlchemyError:
            logger.exception(f"Error adding/updating item in {self.collection}")
            raise

    async def delete(self, key: str) -> bool:
        """Delete the row stored under ``key``. Returns False if absent."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(self._row_type, key)
                    if row is None:
                        return False
                    await session.delete(row)
            return True
        except SQLAlchemyError:
            logger.exception(f"Error deleting item {key} from {self.collection}")
            raise

    async def delete_by_index(self, space_id: str) -> int:
        """Delete every row whose ``space_id`` matches. Zero matches is fine."""
        stmt = delete(self._row_type).where(self._index_column() == space_id)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(stmt)
            count = result.rowcount or 0
            logger.debug(f"Deleted {count} rows from {self.collection} for space {space_id[:8]}")
            return count
        except SQLAlchemyError:
            logger.exception(
                f"Error deleting items by space_id {space_id} from {self.collection}"
            )
            raise
