"""Domain models exchanged between services and the presentation layer."""
from __future__ import annotations

from okapiflow.models.actions import (
    Action,
    ActionCreate,
    ActionStep,
    MultiStepAction,
    MultiStepActionCreate,
    StepCreate,
)
from okapiflow.models.base import CamelModel
from okapiflow.models.logs import (
    TIMWOODS_CATEGORIES,
    LogEntry,
    LogEntryCreate,
    LogEntryType,
    WasteCategory,
    WasteEntry,
    get_waste_category,
)
from okapiflow.models.notes import Comment, CommentCreate, TodoItem, TodoItemCreate
from okapiflow.models.space import Space, SpaceCreate

__all__ = [
    "Action",
    "ActionCreate",
    "ActionStep",
    "CamelModel",
    "Comment",
    "CommentCreate",
    "LogEntry",
    "LogEntryCreate",
    "LogEntryType",
    "MultiStepAction",
    "MultiStepActionCreate",
    "Space",
    "SpaceCreate",
    "StepCreate",
    "TIMWOODS_CATEGORIES",
    "TodoItem",
    "TodoItemCreate",
    "WasteCategory",
    "WasteEntry",
    "get_waste_category",
]
