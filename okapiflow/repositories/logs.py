"""Log entry and waste entry repositories (newest first)."""

from __future__ import annotations

from typing import Any

from okapiflow.db import models as db
from okapiflow.models.logs import LogEntry, WasteEntry
from okapiflow.repositories.base import SpaceChildRepository


class LogEntryRepository(SpaceChildRepository[LogEntry, db.LogEntry]):
    entity_name = "LogEntry"
    model_type = LogEntry
    row_type = db.LogEntry

    def _order_by(self) -> Any:
        return db.LogEntry.timestamp.desc()


class WasteEntryRepository(SpaceChildRepository[WasteEntry, db.WasteEntry]):
    entity_name = "WasteEntry"
    model_type = WasteEntry
    row_type = db.WasteEntry

    def _order_by(self) -> Any:
        return db.WasteEntry.timestamp.desc()
