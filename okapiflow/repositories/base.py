"""Generic repository over an EntityStore.

Repositories translate between ORM rows and domain models. Columns map
one-to-one onto model fields, so the translation is generic: a row becomes a
dict of its column values (timestamps coerced back to aware UTC) and is
validated into the model; a model is dumped straight into a row.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from okapiflow.core.errors import NotFoundError
from okapiflow.db.database import Base
from okapiflow.db.models import generate_uuid, utc_now
from okapiflow.store import EntityStore, as_utc

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
RowT = TypeVar("RowT", bound=Base)

Clock = Callable[[], datetime]


class Repository(Generic[ModelT, RowT]):
    """Keyed CRUD for one entity type."""

    entity_name: ClassVar[str]
    model_type: type[ModelT]
    row_type: type[RowT]

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._store: EntityStore[RowT] = EntityStore(session_factory, self.row_type)
        self._clock = clock

    # -- translation -------------------------------------------------------

    def _row_values(self, row: RowT) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for column in row.__table__.columns:
            value = getattr(row, column.key)
            if isinstance(value, datetime):
                value = as_utc(value)
            values[column.key] = value
        return values

    def _to_model(self, row: RowT) -> ModelT:
        return self.model_type.model_validate(self._row_values(row))

    def _to_row(self, model: ModelT) -> RowT:
        return self.row_type(**model.model_dump())

    # -- contract ----------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        row = await self._store.get(entity_id)
        if row is None:
            return None
        return self._to_model(row)

    async def get_all(self) -> list[ModelT]:
        rows = await self._store.get_all()
        return [self._to_model(r) for r in rows]

    async def add(self, data: Mapping[str, Any]) -> ModelT:
        """Assign a fresh id, persist, and return the stored entity."""
        model = self.model_type.model_validate({**data, "id": generate_uuid()})
        await self._store.put(self._to_row(model))
        logger.debug(f"Added {self.entity_name} {getattr(model, 'id')[:8]}")
        return model

    async def update(self, model: ModelT) -> None:
        """Replace the stored entity by id.

        Raises:
            NotFoundError: If no entity with this id exists.
        """
        entity_id = getattr(model, "id")
        if await self._store.get(entity_id) is None:
            raise NotFoundError(self.entity_name, entity_id)
        await self._store.put(self._to_row(model))

    async def delete(self, entity_id: str) -> None:
        """Delete by id.

        Raises:
            NotFoundError: If no entity with this id exists.
        """
        if not await self._store.delete(entity_id):
            raise NotFoundError(self.entity_name, entity_id)


class SpaceChildRepository(Repository[ModelT, RowT]):
    """Repository for an entity owned by a Space through ``space_id``."""

    def _order_by(self) -> Any:
        """Column expression for ``get_by_space_id`` ordering; None = unordered."""
        return None

    async def get_by_space_id(self, space_id: str) -> list[ModelT]:
        rows = await self._store.get_all_by_index(space_id, order_by=self._order_by())
        return [self._to_model(r) for r in rows]

    async def delete_by_space_id(self, space_id: str) -> int:
        """Delete every entity of this type owned by ``space_id``. Idempotent."""
        return await self._store.delete_by_index(space_id)
