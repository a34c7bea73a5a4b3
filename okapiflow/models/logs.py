"""
Log and waste models.

Log entries and waste entries are append-only: they are never edited after
creation, and every point total is a fold over them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from okapiflow.models.base import CamelModel


# Log entry discriminant
LogEntryType = Literal["action", "multiStepAction", "clockIn", "clockOut"]


class LogEntryCreate(CamelModel):
    """Fields for a new log entry; the timestamp is stamped by LogEntryService."""
    space_id: str
    action_name: str
    points: int = 0
    type: LogEntryType

    multi_step_action_id: Optional[str] = None
    step_index: Optional[int] = None

    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    minutes_clocked_in: Optional[int] = None


class LogEntry(CamelModel):
    """A stored log entry."""
    id: str
    space_id: str
    timestamp: datetime
    action_name: str
    points: int = 0
    type: LogEntryType

    multi_step_action_id: Optional[str] = Field(
        default=None, description="Set for multiStepAction entries"
    )
    step_index: Optional[int] = Field(
        default=None, description="Index of the completed step for multiStepAction entries"
    )
    clock_in_time: Optional[datetime] = Field(default=None, description="Set for clockOut entries")
    clock_out_time: Optional[datetime] = Field(default=None, description="Set for clockOut entries")
    minutes_clocked_in: Optional[int] = Field(default=None, description="Set for clockOut entries")


class WasteCategory(CamelModel):
    """One of the eight fixed TIMWOODS waste categories."""
    id: str
    name: str
    description: str
    points: int = Field(..., ge=1, le=8)


TIMWOODS_CATEGORIES: tuple[WasteCategory, ...] = (
    WasteCategory(id="transportation", name="Transportation", points=1,
                  description="Unnecessary movement of materials or products."),
    WasteCategory(id="inventory", name="Inventory", points=2,
                  description="Excess raw materials, work in progress, or finished goods."),
    WasteCategory(id="motion", name="Motion", points=3,
                  description="Unnecessary movement of people."),
    WasteCategory(id="waiting", name="Waiting", points=4,
                  description="Idle time waiting for the next step in a process."),
    WasteCategory(id="overprocessing", name="Overprocessing", points=5,
                  description="Performing more work than is necessary."),
    WasteCategory(id="overproduction", name="Overproduction", points=6,
                  description="Producing more than is needed."),
    WasteCategory(id="defects", name="Defects", points=7,
                  description="Rework or scrap due to errors or defects."),
    WasteCategory(id="skills", name="Skills", points=8,
                  description="Underutilizing people's talents and skills."),
)

_CATEGORIES_BY_ID: dict[str, WasteCategory] = {c.id: c for c in TIMWOODS_CATEGORIES}


def get_waste_category(category_id: str) -> WasteCategory | None:
    """Look up a category by id (case-insensitive). None for unknown ids."""
    return _CATEGORIES_BY_ID.get(category_id.strip().lower())


class WasteEntry(CamelModel):
    """A stored waste observation; ``type`` is the category display name."""
    id: str
    space_id: str
    timestamp: datetime
    type: str
    points: int
