"""Space repository."""

from __future__ import annotations

from typing import Any

from okapiflow.db import models as db
from okapiflow.models.space import Space
from okapiflow.repositories.base import Repository


class SpaceRepository(Repository[Space, db.Space]):
    entity_name = "Space"
    model_type = Space
    row_type = db.Space

    def _row_values(self, row: db.Space) -> dict[str, Any]:
        values = super()._row_values(row)
        # A start time without the flag (or the reverse) reads as clocked out.
        clocked_in = bool(values.get("is_clocked_in")) and values.get("clock_in_start_time") is not None
        values["is_clocked_in"] = clocked_in
        if not clocked_in:
            values["clock_in_start_time"] = None
        return values

    async def update(self, model: Space) -> None:
        """Replace the Space, always stamping a fresh ``date_modified``."""
        await super().update(model.model_copy(update={"date_modified": self._clock()}))

    async def touch(self, space_id: str) -> Space | None:
        """Refresh ``date_modified``. Returns None if the Space is gone."""
        space = await self.get_by_id(space_id)
        if space is None:
            return None
        stamped = space.model_copy(update={"date_modified": self._clock()})
        await self._store.put(self._to_row(stamped))
        return stamped
