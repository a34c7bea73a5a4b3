"""
Log entry and waste entry services.

Both collections are append-only. Totals are always folded from the stored
entries, never kept as a separate counter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from okapiflow.core.errors import NotFoundError
from okapiflow.db.models import utc_now
from okapiflow.models.logs import LogEntry, LogEntryCreate, WasteEntry, get_waste_category
from okapiflow.repositories.base import Clock
from okapiflow.repositories.logs import LogEntryRepository, WasteEntryRepository
from okapiflow.repositories.spaces import SpaceRepository
from okapiflow.services.base import SpaceOwnedService, require_text
from okapiflow.services.metrics import elapsed_minutes, total_points, total_waste_points

logger = logging.getLogger(__name__)


class LogEntryService(SpaceOwnedService):
    """Appends and reads log entries."""

    def __init__(
        self,
        entries: LogEntryRepository,
        spaces: SpaceRepository | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(spaces, clock=clock)
        self._entries = entries

    async def add_log_entry(self, data: LogEntryCreate) -> LogEntry:
        """
        Append a log entry stamped with the current time.

        A clockOut entry carrying ``clock_in_time`` but no
        ``minutes_clocked_in`` gets the minutes computed here.
        """
        action_name = require_text(data.action_name, "action_name", "Log entry needs an action name.")
        now = self._clock()
        minutes = data.minutes_clocked_in
        if data.type == "clockOut":
            if data.clock_in_time is None:
                logger.warning("Clock out entry added without clock in time.")
            elif minutes is None:
                minutes = elapsed_minutes(data.clock_in_time, data.clock_out_time or now)

        await self._touch_owner(data.space_id)
        entry = await self._entries.add({
            **data.model_dump(),
            "action_name": action_name,
            "timestamp": now,
            "minutes_clocked_in": minutes,
        })
        logger.debug(f"Logged {entry.type} '{action_name}' +{entry.points} in space {data.space_id[:8]}")
        return entry

    async def get_log_entries_for_space(self, space_id: str) -> list[LogEntry]:
        """Newest first."""
        return await self._entries.get_by_space_id(space_id)

    async def get_total_points_for_space(self, space_id: str) -> int:
        return total_points(await self.get_log_entries_for_space(space_id))

    async def get_log_entry(self, entry_id: str) -> LogEntry:
        entry = await self._entries.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError("LogEntry", entry_id)
        return entry

    async def delete_log_entry(self, entry_id: str) -> None:
        await self._entries.delete(entry_id)

    async def delete_log_entries_for_space(self, space_id: str) -> int:
        return await self._entries.delete_by_space_id(space_id)


class WasteEntryService(SpaceOwnedService):
    """Batch TIMWOODS waste logging."""

    def __init__(
        self,
        entries: WasteEntryRepository,
        spaces: SpaceRepository | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(spaces, clock=clock)
        self._entries = entries

    async def add_waste_entries(
        self,
        space_id: str,
        category_ids: Iterable[str],
    ) -> list[WasteEntry]:
        """
        Create one entry per known category, all sharing one timestamp.

        Unknown category ids are skipped with a warning. A batch without any
        known category writes nothing and returns an empty list.
        """
        categories = []
        for category_id in category_ids:
            category = get_waste_category(category_id)
            if category is None:
                logger.warning(f"Unknown waste category ID: {category_id}")
                continue
            categories.append(category)

        if not categories:
            return []

        await self._touch_owner(space_id)
        now = self._clock()
        added: list[WasteEntry] = []
        for category in categories:
            added.append(await self._entries.add({
                "space_id": space_id,
                "timestamp": now,
                "type": category.name,
                "points": category.points,
            }))
        logger.info(
            f"Logged {len(added)} waste entries ({sum(e.points for e in added)} pts) "
            f"in space {space_id[:8]}"
        )
        return added

    async def get_waste_entries_for_space(self, space_id: str) -> list[WasteEntry]:
        """Newest first."""
        return await self._entries.get_by_space_id(space_id)

    async def get_total_waste_points_for_space(self, space_id: str) -> int:
        return total_waste_points(await self.get_waste_entries_for_space(space_id))

    async def get_waste_entry(self, entry_id: str) -> WasteEntry:
        entry = await self._entries.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError("WasteEntry", entry_id)
        return entry

    async def delete_waste_entry(self, entry_id: str) -> None:
        await self._entries.delete(entry_id)

    async def delete_waste_entries_for_space(self, space_id: str) -> int:
        return await self._entries.delete_by_space_id(space_id)
