"""
Space models.

A Space is the aggregate root: every Action, quest, log entry, waste entry,
comment and to-do belongs to exactly one Space and is deleted with it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from okapiflow.models.base import CamelModel


class SpaceCreate(CamelModel):
    """User-supplied fields for a new Space (dates and clock state are assigned)."""
    name: str = ""
    description: Optional[str] = None
    goal: Optional[str] = None
    before_image: Optional[str] = Field(default=None, description="Data URI or URL")
    after_image: Optional[str] = Field(default=None, description="Data URI or URL")


class Space(CamelModel):
    """
    A stored Space.

    Invariant: ``clock_in_start_time`` is set iff ``is_clocked_in``.
    """
    id: str
    name: str
    description: Optional[str] = None
    goal: Optional[str] = None
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    date_created: datetime
    date_modified: datetime
    total_clocked_in_time: int = Field(default=0, ge=0, description="Cumulative minutes")
    is_clocked_in: bool = False
    clock_in_start_time: Optional[datetime] = None

    @model_validator(mode="after")
    def _clock_state_consistent(self) -> "Space":
        if self.is_clocked_in != (self.clock_in_start_time is not None):
            raise ValueError("clock_in_start_time must be set iff is_clocked_in")
        return self
