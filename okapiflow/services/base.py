"""Shared plumbing for services whose entities belong to a Space."""

from __future__ import annotations

import logging

from okapiflow.core.errors import DomainValidationError, NotFoundError
from okapiflow.db.models import utc_now
from okapiflow.repositories.base import Clock
from okapiflow.repositories.spaces import SpaceRepository

logger = logging.getLogger(__name__)


def require_text(value: str | None, field: str, message: str) -> str:
    """Return ``value`` stripped, or raise DomainValidationError if blank."""
    text = (value or "").strip()
    if not text:
        raise DomainValidationError(field, message)
    return text


class SpaceOwnedService:
    """
    Base for child-entity services.

    When a SpaceRepository is wired in, creating a child first checks that the
    owning Space exists and refreshes its ``date_modified``.
    """

    def __init__(self, spaces: SpaceRepository | None = None, *, clock: Clock = utc_now) -> None:
        self._spaces = spaces
        self._clock = clock

    async def _touch_owner(self, space_id: str) -> None:
        if self._spaces is None:
            return
        if await self._spaces.touch(space_id) is None:
            raise NotFoundError("Space", space_id)
