"""Per-entity repositories over the embedded store."""
from __future__ import annotations

from okapiflow.repositories.actions import ActionRepository, MultiStepActionRepository
from okapiflow.repositories.base import Repository, SpaceChildRepository
from okapiflow.repositories.factory import RepositoryFactory
from okapiflow.repositories.logs import LogEntryRepository, WasteEntryRepository
from okapiflow.repositories.notes import CommentRepository, TodoRepository
from okapiflow.repositories.spaces import SpaceRepository

__all__ = [
    "ActionRepository",
    "CommentRepository",
    "LogEntryRepository",
    "MultiStepActionRepository",
    "Repository",
    "RepositoryFactory",
    "SpaceChildRepository",
    "SpaceRepository",
    "TodoRepository",
    "WasteEntryRepository",
]
