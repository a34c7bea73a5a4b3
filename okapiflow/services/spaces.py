"""
Space service: lifecycle orchestration across every child collection.

Handles creation defaults, clock sessions, point-earning commands, cascading
delete and duplication.

Cascading operations are a sequence of independent store operations with no
shared transaction. Delete runs every child step even after one fails, keeps
the Space row when anything failed (so the delete can be repeated), and
reports the failures as a CascadeError. Duplication reports a failure after
the copy was created the same way, naming the partial copy.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from okapiflow.core.errors import CascadeError, DomainValidationError, FailedStep, NotFoundError
from okapiflow.db.models import utc_now
from okapiflow.models.actions import ActionCreate, MultiStepAction, MultiStepActionCreate, StepCreate
from okapiflow.models.logs import LogEntry, LogEntryCreate
from okapiflow.models.space import Space, SpaceCreate
from okapiflow.repositories.base import Clock
from okapiflow.repositories.spaces import SpaceRepository
from okapiflow.services.actions import ActionService
from okapiflow.services.base import require_text
from okapiflow.services.logs import LogEntryService, WasteEntryService
from okapiflow.services.metrics import elapsed_minutes
from okapiflow.services.notes import CommentService, TodoService
from okapiflow.services.quests import MultiStepActionService

logger = logging.getLogger(__name__)

CLOCK_IN_NAME = "Clock In"
CLOCK_OUT_NAME = "Clock Out"
COPY_SUFFIX = " (Copy)"


class SpaceService:
    """Orchestrates Space lifecycle over the per-entity services."""

    def __init__(
        self,
        spaces: SpaceRepository,
        actions: ActionService,
        quests: MultiStepActionService,
        logs: LogEntryService,
        waste: WasteEntryService,
        comments: CommentService,
        todos: TodoService,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._spaces = spaces
        self._actions = actions
        self._quests = quests
        self._logs = logs
        self._waste = waste
        self._comments = comments
        self._todos = todos
        self._clock = clock

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create_space(self, data: SpaceCreate) -> Space:
        """
        Create a Space with zero clocked time and no clock session.

        Raises:
            DomainValidationError: If the name is empty
        """
        name = require_text(data.name, "name", "Space name cannot be empty.")
        now = self._clock()
        space = await self._spaces.add({
            **data.model_dump(),
            "name": name,
            "date_created": now,
            "date_modified": now,
            "total_clocked_in_time": 0,
            "is_clocked_in": False,
            "clock_in_start_time": None,
        })
        logger.info(f"Created space {space.id[:8]} '{name}'")
        return space

    async def get_space(self, space_id: str) -> Space:
        space = await self._spaces.get_by_id(space_id)
        if space is None:
            raise NotFoundError("Space", space_id)
        return space

    async def list_spaces(self) -> list[Space]:
        """All Spaces, most recently modified first."""
        spaces = await self._spaces.get_all()
        return sorted(spaces, key=lambda s: s.date_modified, reverse=True)

    async def update_space(self, space: Space) -> Space:
        """
        Replace a Space. ``date_modified`` is always refreshed by the store.

        Raises:
            DomainValidationError: If the name is empty
            NotFoundError: If the Space does not exist
        """
        name = require_text(space.name, "name", "Space name cannot be empty.")
        await self._spaces.update(space.model_copy(update={"name": name}))
        return await self.get_space(space.id)

    # =========================================================================
    # Clock sessions
    # =========================================================================

    async def add_clocked_time(self, space_id: str, additional_minutes: int) -> Space:
        """
        Add minutes to the Space's clocked total.

        Negative adjustments are ignored with a warning so the total never
        decreases; the Space is returned unchanged.
        """
        space = await self.get_space(space_id)
        if additional_minutes < 0:
            logger.warning(
                f"Attempted to add negative clocked time ({additional_minutes}) to space {space_id[:8]}."
            )
            return space
        await self._spaces.update(space.model_copy(update={
            "total_clocked_in_time": space.total_clocked_in_time + additional_minutes,
        }))
        return await self.get_space(space_id)

    async def clock_in(self, space_id: str) -> Space:
        """
        Start a clock session and log a clockIn entry.

        Clocking in while already clocked in changes nothing and logs nothing.
        """
        space = await self.get_space(space_id)
        if space.is_clocked_in:
            logger.warning(f"Space {space_id[:8]} is already clocked in.")
            return space

        now = self._clock()
        await self._spaces.update(space.model_copy(update={
            "is_clocked_in": True,
            "clock_in_start_time": now,
        }))
        await self._logs.add_log_entry(LogEntryCreate(
            space_id=space_id,
            action_name=CLOCK_IN_NAME,
            points=0,
            type="clockIn",
        ))
        logger.info(f"Space {space_id[:8]} clocked in")
        return await self.get_space(space_id)

    async def clock_out(self, space_id: str) -> Space:
        """
        End the clock session: add its whole minutes to the total, clear the
        session, and log a clockOut entry carrying the minutes.

        Clocking out while not clocked in changes nothing and logs nothing.
        """
        space = await self.get_space(space_id)
        if not space.is_clocked_in or space.clock_in_start_time is None:
            logger.warning(f"Space {space_id[:8]} is not clocked in.")
            return space

        now = self._clock()
        started = space.clock_in_start_time
        minutes = elapsed_minutes(started, now)
        await self._spaces.update(space.model_copy(update={
            "total_clocked_in_time": space.total_clocked_in_time + minutes,
            "is_clocked_in": False,
            "clock_in_start_time": None,
        }))
        await self._logs.add_log_entry(LogEntryCreate(
            space_id=space_id,
            action_name=CLOCK_OUT_NAME,
            points=0,
            type="clockOut",
            clock_in_time=started,
            clock_out_time=now,
            minutes_clocked_in=minutes,
        ))
        logger.info(f"Space {space_id[:8]} clocked out after {minutes} min")
        return await self.get_space(space_id)

    # =========================================================================
    # Point-earning commands
    # =========================================================================

    async def log_action(self, action_id: str, multiplier: int = 1) -> LogEntry:
        """Log ``multiplier`` repetitions of an Action as one action entry."""
        if multiplier < 1:
            raise DomainValidationError("multiplier", "Multiplier must be at least 1.")
        action = await self._actions.get_action(action_id)
        return await self._logs.add_log_entry(LogEntryCreate(
            space_id=action.space_id,
            action_name=f"{action.name} (x{multiplier})",
            points=action.points * multiplier,
            type="action",
        ))

    async def complete_quest_step(
        self, quest_id: str
    ) -> tuple[MultiStepAction, LogEntry | None]:
        """
        Complete the quest's current step and credit ``points_per_step``.

        On a complete quest nothing changes and no entry is logged.
        """
        quest, step = await self._quests.advance_current_step(quest_id)
        if step is None:
            return quest, None
        entry = await self._logs.add_log_entry(LogEntryCreate(
            space_id=quest.space_id,
            action_name=f"{quest.name}: {step.name}",
            points=quest.points_per_step,
            type="multiStepAction",
            multi_step_action_id=quest.id,
            step_index=quest.current_step_index - 1,
        ))
        return quest, entry

    # =========================================================================
    # Cascading operations
    # =========================================================================

    async def _run_steps(
        self,
        steps: list[tuple[str, Callable[[], Awaitable[Any]]]],
    ) -> list[FailedStep]:
        failed: list[FailedStep] = []
        for name, step in steps:
            try:
                await step()
            except Exception as exc:
                logger.error(f"Cascade step '{name}' failed: {exc}")
                failed.append(FailedStep(step=name, error=exc))
        return failed

    async def delete_space(self, space_id: str) -> None:
        """
        Delete a Space and every child row that references it.

        Raises:
            CascadeError: If any child collection could not be cleared; the
                Space row is kept so the delete can be repeated
            NotFoundError: If the Space row does not exist (children, if any,
                are still cleared)
        """
        failed = await self._run_steps([
            ("actions", lambda: self._actions.delete_actions_for_space(space_id)),
            ("multi_step_actions", lambda: self._quests.delete_multi_step_actions_for_space(space_id)),
            ("log_entries", lambda: self._logs.delete_log_entries_for_space(space_id)),
            ("waste_entries", lambda: self._waste.delete_waste_entries_for_space(space_id)),
            ("comments", lambda: self._comments.delete_comments_for_space(space_id)),
            ("todos", lambda: self._todos.delete_todo_items_for_space(space_id)),
        ])
        if failed:
            raise CascadeError("delete", space_id, failed)

        await self._spaces.delete(space_id)
        logger.info(f"Deleted space {space_id[:8]} and all child entities")

    async def duplicate_space(self, space_id: str) -> Space | None:
        """
        Copy a Space with its Actions and quests (progress reset).

        Logs, waste, comments and to-dos are not copied. Returns None when
        the source Space does not exist.

        Raises:
            CascadeError: If some children could not be copied; the partial
                copy's id is in ``partial_space_id``
        """
        source = await self._spaces.get_by_id(space_id)
        if source is None:
            logger.error(f"Cannot duplicate: Space with ID {space_id} not found.")
            return None

        copy = await self.create_space(SpaceCreate(
            name=f"{source.name}{COPY_SUFFIX}",
            description=source.description,
            goal=source.goal,
            before_image=source.before_image,
            after_image=source.after_image,
        ))

        actions = await self._actions.get_actions_for_space(space_id)
        quests = await self._quests.get_multi_step_actions_for_space(space_id)

        steps: list[tuple[str, Callable[[], Awaitable[Any]]]] = []
        for action in actions:
            data = ActionCreate(
                space_id=copy.id,
                name=action.name,
                description=action.description,
                points=action.points,
            )
            steps.append((f"action:{action.id}", lambda d=data: self._actions.create_action(d)))
        for quest in quests:
            quest_data = MultiStepActionCreate(
                space_id=copy.id,
                name=quest.name,
                description=quest.description,
                points_per_step=quest.points_per_step,
                steps=[StepCreate(name=s.name) for s in quest.steps],
            )
            steps.append((
                f"multi_step_action:{quest.id}",
                lambda d=quest_data: self._quests.create_multi_step_action(d),
            ))

        failed = await self._run_steps(steps)
        if failed:
            raise CascadeError("duplicate", space_id, failed, partial_space_id=copy.id)

        logger.info(
            f"Space {space_id[:8]} duplicated into {copy.id[:8]} "
            f"({len(actions)} actions, {len(quests)} quests)"
        )
        return await self.get_space(copy.id)
