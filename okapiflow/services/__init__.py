"""Services for OkapiFlow."""
from __future__ import annotations

from okapiflow.services.actions import ActionService
from okapiflow.services.container import Services, build_services
from okapiflow.services.logs import LogEntryService, WasteEntryService
from okapiflow.services.metrics import SpaceMetrics, compute_metrics, format_elapsed
from okapiflow.services.notes import CommentService, TodoService
from okapiflow.services.quests import MultiStepActionService
from okapiflow.services.spaces import SpaceService

__all__ = [
    "ActionService",
    "CommentService",
    "LogEntryService",
    "MultiStepActionService",
    "Services",
    "SpaceMetrics",
    "SpaceService",
    "TodoService",
    "WasteEntryService",
    "build_services",
    "compute_metrics",
    "format_elapsed",
]
