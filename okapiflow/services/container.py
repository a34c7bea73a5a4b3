"""Wires every service against one store."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from okapiflow.db.models import utc_now
from okapiflow.repositories.base import Clock
from okapiflow.repositories.factory import RepositoryFactory
from okapiflow.services.actions import ActionService
from okapiflow.services.logs import LogEntryService, WasteEntryService
from okapiflow.services.notes import CommentService, TodoService
from okapiflow.services.quests import MultiStepActionService
from okapiflow.services.spaces import SpaceService


@dataclass(frozen=True)
class Services:
    """The service set handed to the presentation layer."""
    spaces: SpaceService
    actions: ActionService
    quests: MultiStepActionService
    logs: LogEntryService
    waste: WasteEntryService
    comments: CommentService
    todos: TodoService


def build_services(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    clock: Clock = utc_now,
) -> Services:
    """Build repositories and services sharing one session factory and clock."""
    repos = RepositoryFactory(session_factory, clock=clock)
    space_repo = repos.create_space_repository()

    actions = ActionService(repos.create_action_repository(), space_repo, clock=clock)
    quests = MultiStepActionService(repos.create_multi_step_action_repository(), space_repo, clock=clock)
    logs = LogEntryService(repos.create_log_entry_repository(), space_repo, clock=clock)
    waste = WasteEntryService(repos.create_waste_entry_repository(), space_repo, clock=clock)
    comments = CommentService(repos.create_comment_repository(), space_repo, clock=clock)
    todos = TodoService(repos.create_todo_repository(), space_repo, clock=clock)
    spaces = SpaceService(
        space_repo, actions, quests, logs, waste, comments, todos, clock=clock,
    )
    return Services(
        spaces=spaces,
        actions=actions,
        quests=quests,
        logs=logs,
        waste=waste,
        comments=comments,
        todos=todos,
    )
