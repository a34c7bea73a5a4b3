"""Builds every repository against one store."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from okapiflow.db.models import utc_now
from okapiflow.repositories.actions import ActionRepository, MultiStepActionRepository
from okapiflow.repositories.base import Clock
from okapiflow.repositories.logs import LogEntryRepository, WasteEntryRepository
from okapiflow.repositories.notes import CommentRepository, TodoRepository
from okapiflow.repositories.spaces import SpaceRepository


@dataclass
class RepositoryFactory:
    """Creates repositories sharing one session factory and clock."""

    session_factory: async_sessionmaker[AsyncSession]
    clock: Clock = utc_now

    def create_space_repository(self) -> SpaceRepository:
        return SpaceRepository(self.session_factory, clock=self.clock)

    def create_action_repository(self) -> ActionRepository:
        return ActionRepository(self.session_factory, clock=self.clock)

    def create_multi_step_action_repository(self) -> MultiStepActionRepository:
        return MultiStepActionRepository(self.session_factory, clock=self.clock)

    def create_log_entry_repository(self) -> LogEntryRepository:
        return LogEntryRepository(self.session_factory, clock=self.clock)

    def create_waste_entry_repository(self) -> WasteEntryRepository:
        return WasteEntryRepository(self.session_factory, clock=self.clock)

    def create_comment_repository(self) -> CommentRepository:
        return CommentRepository(self.session_factory, clock=self.clock)

    def create_todo_repository(self) -> TodoRepository:
        return TodoRepository(self.session_factory, clock=self.clock)
