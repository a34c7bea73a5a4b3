"""
Multi-step action (quest) service.

Creation assigns step ids and starts the cursor at 0. Progress only moves
through ``complete_current_step``; see ``okapiflow.core.quest_progress``.
Awarding points for a completed step is the caller's job
(``SpaceService.complete_quest_step``).
"""

from __future__ import annotations

import logging

from okapiflow.core.errors import DomainValidationError, NotFoundError
from okapiflow.core.quest_progress import QuestProgressError, advance, align_steps, check_progress
from okapiflow.db.models import generate_uuid, utc_now
from okapiflow.models.actions import ActionStep, MultiStepAction, MultiStepActionCreate
from okapiflow.repositories.actions import MultiStepActionRepository
from okapiflow.repositories.base import Clock
from okapiflow.repositories.spaces import SpaceRepository
from okapiflow.services.base import SpaceOwnedService, require_text

logger = logging.getLogger(__name__)


class MultiStepActionService(SpaceOwnedService):
    """CRUD, validation and step progression for quests."""

    def __init__(
        self,
        quests: MultiStepActionRepository,
        spaces: SpaceRepository | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(spaces, clock=clock)
        self._quests = quests

    async def create_multi_step_action(self, data: MultiStepActionCreate) -> MultiStepAction:
        """
        Create a quest with fresh step ids, all steps open, cursor at 0.

        Raises:
            DomainValidationError: If the name is empty, there are no steps,
                or a step has no name
            NotFoundError: If the owning Space does not exist
        """
        name = require_text(data.name, "name", "Multi-step action name cannot be empty.")
        if not data.steps:
            raise DomainValidationError("steps", "Multi-step action must have at least one step.")
        step_names = [
            require_text(s.name, "steps", "Multi-step action steps must have a name.")
            for s in data.steps
        ]
        points_per_step = data.points_per_step
        if points_per_step <= 0:
            logger.warning(
                f"Multi-step action points per step are non-positive ({points_per_step}). Setting to 1."
            )
            points_per_step = 1

        await self._touch_owner(data.space_id)
        quest = await self._quests.add({
            "space_id": data.space_id,
            "name": name,
            "description": data.description,
            "points_per_step": points_per_step,
            "current_step_index": 0,
            "steps": [
                {"id": generate_uuid(), "name": step_name, "completed": False}
                for step_name in step_names
            ],
        })
        logger.info(f"Created quest {quest.id[:8]} '{name}' with {len(step_names)} steps")
        return quest

    async def get_multi_step_action(self, quest_id: str) -> MultiStepAction:
        quest = await self._quests.get_by_id(quest_id)
        if quest is None:
            raise NotFoundError("MultiStepAction", quest_id)
        return quest

    async def get_multi_step_actions_for_space(self, space_id: str) -> list[MultiStepAction]:
        return await self._quests.get_by_space_id(space_id)

    async def update_multi_step_action(self, quest: MultiStepAction) -> MultiStepAction:
        """
        Replace a quest after an explicit edit.

        The cursor is authoritative: step flags are rewritten to agree with it.
        Returns the quest as stored.
        """
        name = require_text(quest.name, "name", "Multi-step action name cannot be empty.")
        if not quest.steps:
            raise DomainValidationError("steps", "Multi-step action must have at least one step.")
        if quest.points_per_step <= 0:
            raise DomainValidationError("points_per_step", "Points per step must be at least 1.")
        if not 0 <= quest.current_step_index <= len(quest.steps):
            raise DomainValidationError("current_step_index", "Invalid current step index.")

        stored = align_steps(quest.model_copy(update={"name": name}))
        await self._quests.update(stored)
        return stored

    async def advance_current_step(
        self, quest_id: str
    ) -> tuple[MultiStepAction, ActionStep | None]:
        """
        Complete the current step and persist.

        Returns the quest and the step just completed; on a complete quest
        nothing is written and the step is None.

        Raises:
            DomainValidationError: If the stored cursor or step flags are
                inconsistent; nothing is written
            NotFoundError: If the quest does not exist
        """
        quest = await self.get_multi_step_action(quest_id)
        try:
            check_progress(quest)
        except QuestProgressError as e:
            logger.error(f"Refusing to advance corrupt quest: {e}")
            raise DomainValidationError("current_step_index", e.reason) from e
        advanced, step = advance(quest)
        if step is not None:
            await self._quests.update(advanced)
        return advanced, step

    async def complete_current_step(self, quest_id: str) -> MultiStepAction:
        quest, _ = await self.advance_current_step(quest_id)
        return quest

    async def delete_multi_step_action(self, quest_id: str) -> None:
        await self._quests.delete(quest_id)

    async def delete_multi_step_actions_for_space(self, space_id: str) -> int:
        return await self._quests.delete_by_space_id(space_id)
