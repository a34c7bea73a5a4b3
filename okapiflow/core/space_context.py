"""
SpaceContext: the in-memory view of one loaded Space.

The presentation layer loads one Space at a time. The context keeps the
Space and its child collections in memory, forwards commands to the services
and refreshes the affected collections afterwards, so ``metrics()`` always
folds over what is stored.

Lifecycle:
    ctx = SpaceContext(services)
    await ctx.load(space_id)     # fetch Space + every child collection
    await ctx.log_action(...)    # command -> store -> mirror refresh
    ctx.metrics()                # derived values, never stored
    await ctx.clear()            # stop the session ticker, drop the mirror

While the Space is clocked in a SessionTicker recomputes the metrics every
``ticker_interval`` seconds and hands them to ``on_tick``.

Commands that address an existing entity only reach rows of the loaded
Space; ids owned by another Space raise NotFoundError.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from typing import Any, Optional

from okapiflow.config import settings
from okapiflow.core.errors import NotFoundError
from okapiflow.core.ticker import SessionTicker
from okapiflow.db.models import utc_now
from okapiflow.models.actions import (
    Action,
    ActionCreate,
    MultiStepAction,
    MultiStepActionCreate,
    StepCreate,
)
from okapiflow.models.logs import LogEntry, WasteEntry
from okapiflow.models.notes import Comment, CommentCreate, TodoItem, TodoItemCreate
from okapiflow.models.space import Space
from okapiflow.repositories.base import Clock
from okapiflow.services.container import Services
from okapiflow.services.metrics import SpaceMetrics, compute_metrics

logger = logging.getLogger(__name__)

MetricsCallback = Callable[[SpaceMetrics], Awaitable[None]]


class SpaceContext:
    """Request-scoped container for the currently loaded Space."""

    def __init__(
        self,
        services: Services,
        *,
        ticker_interval: Optional[float] = None,
        on_tick: Optional[MetricsCallback] = None,
        clock: Clock = utc_now,
    ):
        self._services = services
        self._clock = clock
        self._on_tick = on_tick
        self._ticker = SessionTicker(
            ticker_interval or settings.clock_tick_seconds, self._tick
        )
        self._reset()

    def _reset(self) -> None:
        self._space: Optional[Space] = None
        self._actions: tuple[Action, ...] = ()
        self._quests: tuple[MultiStepAction, ...] = ()
        self._log_entries: tuple[LogEntry, ...] = ()
        self._waste_entries: tuple[WasteEntry, ...] = ()
        self._comments: tuple[Comment, ...] = ()
        self._todos: tuple[TodoItem, ...] = ()
        self.last_metrics: Optional[SpaceMetrics] = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_loaded(self) -> bool:
        return self._space is not None

    @property
    def ticking(self) -> bool:
        return self._ticker.running

    async def load(self, space_id: str) -> Space:
        """
        Load a Space and all its child collections, replacing any previous view.

        Raises:
            NotFoundError: If the Space does not exist (the context is left empty)
        """
        await self.clear()
        svc = self._services
        space = await svc.spaces.get_space(space_id)
        self._actions = tuple(await svc.actions.get_actions_for_space(space_id))
        self._quests = tuple(await svc.quests.get_multi_step_actions_for_space(space_id))
        self._log_entries = tuple(await svc.logs.get_log_entries_for_space(space_id))
        self._waste_entries = tuple(await svc.waste.get_waste_entries_for_space(space_id))
        self._comments = tuple(await svc.comments.get_comments_for_space(space_id))
        self._todos = tuple(await svc.todos.get_todo_items_for_space(space_id))
        self._space = space
        self._sync_ticker()
        logger.info(
            f"Loaded space {space_id[:8]}: {len(self._actions)} actions, "
            f"{len(self._quests)} quests, {len(self._log_entries)} log entries"
        )
        return space

    async def clear(self) -> None:
        """Stop the session ticker and drop the loaded view."""
        await self._ticker.stop()
        if self._space is not None:
            logger.debug(f"Cleared space {self._space.id[:8]}")
        self._reset()

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def space(self) -> Space:
        return self._require_space()

    @property
    def actions(self) -> tuple[Action, ...]:
        return self._actions

    @property
    def quests(self) -> tuple[MultiStepAction, ...]:
        return self._quests

    @property
    def log_entries(self) -> tuple[LogEntry, ...]:
        """Newest first."""
        return self._log_entries

    @property
    def waste_entries(self) -> tuple[WasteEntry, ...]:
        """Newest first."""
        return self._waste_entries

    @property
    def comments(self) -> tuple[Comment, ...]:
        return self._comments

    @property
    def todos(self) -> tuple[TodoItem, ...]:
        return self._todos

    def metrics(self, now: Optional[datetime] = None) -> SpaceMetrics:
        """Derived values over the loaded collections at ``now`` (default: clock)."""
        return compute_metrics(
            self._require_space(),
            list(self._log_entries),
            list(self._waste_entries),
            now or self._clock(),
        )

    # =========================================================================
    # Commands
    # =========================================================================

    async def create_action(
        self, name: str, points: int = 1, description: Optional[str] = None
    ) -> Action:
        space_id = self._require_space().id
        action = await self._services.actions.create_action(ActionCreate(
            space_id=space_id, name=name, points=points, description=description,
        ))
        await self._refresh_actions()
        await self._refresh_space()
        return action

    async def delete_action(self, action_id: str) -> None:
        self._require_owned(await self._services.actions.get_action(action_id), "Action", action_id)
        await self._services.actions.delete_action(action_id)
        await self._refresh_actions()

    async def create_quest(
        self,
        name: str,
        step_names: Iterable[str],
        points_per_step: int = 1,
        description: Optional[str] = None,
    ) -> MultiStepAction:
        space_id = self._require_space().id
        quest = await self._services.quests.create_multi_step_action(MultiStepActionCreate(
            space_id=space_id,
            name=name,
            description=description,
            points_per_step=points_per_step,
            steps=[StepCreate(name=n) for n in step_names],
        ))
        await self._refresh_quests()
        await self._refresh_space()
        return quest

    async def delete_quest(self, quest_id: str) -> None:
        self._require_owned(
            await self._services.quests.get_multi_step_action(quest_id), "MultiStepAction", quest_id
        )
        await self._services.quests.delete_multi_step_action(quest_id)
        await self._refresh_quests()

    async def log_action(self, action_id: str, multiplier: int = 1) -> LogEntry:
        self._require_owned(await self._services.actions.get_action(action_id), "Action", action_id)
        entry = await self._services.spaces.log_action(action_id, multiplier)
        await self._refresh_logs()
        await self._refresh_space()
        return entry

    async def complete_step(
        self, quest_id: str
    ) -> tuple[MultiStepAction, Optional[LogEntry]]:
        self._require_owned(
            await self._services.quests.get_multi_step_action(quest_id), "MultiStepAction", quest_id
        )
        quest, entry = await self._services.spaces.complete_quest_step(quest_id)
        await self._refresh_quests()
        if entry is not None:
            await self._refresh_logs()
            await self._refresh_space()
        return quest, entry

    async def delete_log_entry(self, entry_id: str) -> None:
        self._require_owned(await self._services.logs.get_log_entry(entry_id), "LogEntry", entry_id)
        await self._services.logs.delete_log_entry(entry_id)
        await self._refresh_logs()

    async def clock_in(self) -> Space:
        space_id = self._require_space().id
        self._space = await self._services.spaces.clock_in(space_id)
        await self._refresh_logs()
        self._sync_ticker()
        return self._space

    async def clock_out(self) -> Space:
        space_id = self._require_space().id
        await self._ticker.stop()
        try:
            self._space = await self._services.spaces.clock_out(space_id)
        except Exception:
            self._sync_ticker()
            raise
        await self._refresh_logs()
        self._sync_ticker()
        return self._space

    async def log_waste(self, category_ids: Iterable[str]) -> list[WasteEntry]:
        space_id = self._require_space().id
        added = await self._services.waste.add_waste_entries(space_id, category_ids)
        if added:
            await self._refresh_waste()
            await self._refresh_space()
        return added

    async def delete_waste_entry(self, entry_id: str) -> None:
        self._require_owned(await self._services.waste.get_waste_entry(entry_id), "WasteEntry", entry_id)
        await self._services.waste.delete_waste_entry(entry_id)
        await self._refresh_waste()

    async def add_comment(self, text: str = "", image_url: Optional[str] = None) -> Comment:
        space_id = self._require_space().id
        comment = await self._services.comments.add_comment(CommentCreate(
            space_id=space_id, text=text, image_url=image_url,
        ))
        self._comments = tuple(await self._services.comments.get_comments_for_space(space_id))
        await self._refresh_space()
        return comment

    async def delete_comment(self, comment_id: str) -> None:
        space_id = self._require_owned(
            await self._services.comments.get_comment(comment_id), "Comment", comment_id
        )
        await self._services.comments.delete_comment(comment_id)
        self._comments = tuple(await self._services.comments.get_comments_for_space(space_id))

    async def add_todo(self, description: str, before_image: Optional[str]) -> TodoItem:
        space_id = self._require_space().id
        item = await self._services.todos.create_todo_item(TodoItemCreate(
            space_id=space_id, description=description, before_image=before_image,
        ))
        await self._refresh_todos()
        await self._refresh_space()
        return item

    async def complete_todo(self, item_id: str, after_image: str) -> TodoItem:
        self._require_owned(await self._services.todos.get_todo_item(item_id), "TodoItem", item_id)
        item = await self._services.todos.complete_todo_item(item_id, after_image)
        await self._refresh_todos()
        return item

    async def delete_todo(self, item_id: str) -> None:
        self._require_owned(await self._services.todos.get_todo_item(item_id), "TodoItem", item_id)
        await self._services.todos.delete_todo_item(item_id)
        await self._refresh_todos()

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_space(self) -> Space:
        if self._space is None:
            raise RuntimeError("No space loaded. Call load() first.")
        return self._space

    def _require_owned(self, entity: Any, kind: str, entity_id: str) -> str:
        """Return the loaded Space id; entities of other Spaces read as missing."""
        space_id = self._require_space().id
        if entity.space_id != space_id:
            logger.warning(f"{kind} {entity_id[:8]} belongs to another space, not {space_id[:8]}")
            raise NotFoundError(kind, entity_id)
        return space_id

    def _sync_ticker(self) -> None:
        if self._space is not None and self._space.is_clocked_in:
            self._ticker.start()

    async def _tick(self) -> None:
        if self._space is None:
            return
        self.last_metrics = self.metrics()
        if self._on_tick is not None:
            await self._on_tick(self.last_metrics)

    async def _refresh_space(self) -> None:
        self._space = await self._services.spaces.get_space(self._require_space().id)

    async def _refresh_actions(self) -> None:
        space_id = self._require_space().id
        self._actions = tuple(await self._services.actions.get_actions_for_space(space_id))

    async def _refresh_quests(self) -> None:
        space_id = self._require_space().id
        self._quests = tuple(await self._services.quests.get_multi_step_actions_for_space(space_id))

    async def _refresh_logs(self) -> None:
        space_id = self._require_space().id
        self._log_entries = tuple(await self._services.logs.get_log_entries_for_space(space_id))

    async def _refresh_waste(self) -> None:
        space_id = self._require_space().id
        self._waste_entries = tuple(await self._services.waste.get_waste_entries_for_space(space_id))

    async def _refresh_todos(self) -> None:
        space_id = self._require_space().id
        self._todos = tuple(await self._services.todos.get_todo_items_for_space(space_id))
