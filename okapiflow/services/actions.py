"""
Action service.

Actions are validated here before they reach the repository: a name is
required, and non-positive points are coerced to 1 at creation (and rejected
on later edits).
"""

from __future__ import annotations

import logging

from okapiflow.core.errors import DomainValidationError, NotFoundError
from okapiflow.db.models import utc_now
from okapiflow.models.actions import Action, ActionCreate
from okapiflow.repositories.actions import ActionRepository
from okapiflow.repositories.base import Clock
from okapiflow.repositories.spaces import SpaceRepository
from okapiflow.services.base import SpaceOwnedService, require_text

logger = logging.getLogger(__name__)


class ActionService(SpaceOwnedService):
    """CRUD and validation for Actions."""

    def __init__(
        self,
        actions: ActionRepository,
        spaces: SpaceRepository | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(spaces, clock=clock)
        self._actions = actions

    async def create_action(self, data: ActionCreate) -> Action:
        """
        Create a new action in a Space.

        Raises:
            DomainValidationError: If the name is empty
            NotFoundError: If the owning Space does not exist
        """
        name = require_text(data.name, "name", "Action name cannot be empty.")
        points = data.points
        if points <= 0:
            logger.warning(f"Action points are non-positive ({points}). Setting to 1.")
            points = 1

        await self._touch_owner(data.space_id)
        action = await self._actions.add({
            "space_id": data.space_id,
            "name": name,
            "description": data.description,
            "points": points,
        })
        logger.info(f"Created action {action.id[:8]} '{name}' (+{points}) in space {data.space_id[:8]}")
        return action

    async def get_action(self, action_id: str) -> Action:
        action = await self._actions.get_by_id(action_id)
        if action is None:
            raise NotFoundError("Action", action_id)
        return action

    async def get_actions_for_space(self, space_id: str) -> list[Action]:
        return await self._actions.get_by_space_id(space_id)

    async def update_action(self, action: Action) -> None:
        """Replace an action after validating the edited fields."""
        name = require_text(action.name, "name", "Action name cannot be empty.")
        if action.points <= 0:
            raise DomainValidationError("points", "Action points must be at least 1.")
        await self._actions.update(action.model_copy(update={"name": name}))

    async def delete_action(self, action_id: str) -> None:
        await self._actions.delete(action_id)

    async def delete_actions_for_space(self, space_id: str) -> int:
        return await self._actions.delete_by_space_id(space_id)
