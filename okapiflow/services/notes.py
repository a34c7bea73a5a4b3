"""
Comment and to-do services.

To-do workflow: a before image is captured when the task is created and can
never be removed afterwards; completing the task supplies the after image and
flips ``completed``.
"""

from __future__ import annotations

import logging

from okapiflow.core.errors import DomainValidationError, NotFoundError
from okapiflow.db.models import utc_now
from okapiflow.models.notes import Comment, CommentCreate, TodoItem, TodoItemCreate
from okapiflow.repositories.base import Clock
from okapiflow.repositories.notes import CommentRepository, TodoRepository
from okapiflow.repositories.spaces import SpaceRepository
from okapiflow.services.base import SpaceOwnedService, require_text

logger = logging.getLogger(__name__)


class CommentService(SpaceOwnedService):

    def __init__(
        self,
        comments: CommentRepository,
        spaces: SpaceRepository | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(spaces, clock=clock)
        self._comments = comments

    async def add_comment(self, data: CommentCreate) -> Comment:
        """
        Add a comment stamped with the current time.

        Raises:
            DomainValidationError: If both text and image are empty
        """
        text = (data.text or "").strip()
        image_url = data.image_url or None
        if not text and not image_url:
            raise DomainValidationError("text", "Comment must have text or an image.")

        await self._touch_owner(data.space_id)
        return await self._comments.add({
            "space_id": data.space_id,
            "text": text,
            "image_url": image_url,
            "timestamp": self._clock(),
        })

    async def get_comments_for_space(self, space_id: str) -> list[Comment]:
        """Newest first."""
        return await self._comments.get_by_space_id(space_id)

    async def get_comment(self, comment_id: str) -> Comment:
        comment = await self._comments.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment", comment_id)
        return comment

    async def delete_comment(self, comment_id: str) -> None:
        await self._comments.delete(comment_id)

    async def delete_comments_for_space(self, space_id: str) -> int:
        return await self._comments.delete_by_space_id(space_id)


class TodoService(SpaceOwnedService):

    def __init__(
        self,
        todos: TodoRepository,
        spaces: SpaceRepository | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(spaces, clock=clock)
        self._todos = todos

    async def create_todo_item(self, data: TodoItemCreate) -> TodoItem:
        """
        Create an open to-do item.

        Raises:
            DomainValidationError: If the description or before image is missing
        """
        description = require_text(data.description, "description", "To-Do description cannot be empty.")
        if not data.before_image:
            raise DomainValidationError("before_image", "Before image is required.")

        await self._touch_owner(data.space_id)
        item = await self._todos.add({
            "space_id": data.space_id,
            "description": description,
            "completed": False,
            "before_image": data.before_image,
            "after_image": data.after_image or None,
            "date_created": self._clock(),
        })
        logger.info(f"Created to-do {item.id[:8]} in space {data.space_id[:8]}")
        return item

    async def get_todo_item(self, item_id: str) -> TodoItem:
        item = await self._todos.get_by_id(item_id)
        if item is None:
            raise NotFoundError("TodoItem", item_id)
        return item

    async def get_todo_items_for_space(self, space_id: str) -> list[TodoItem]:
        """Oldest first."""
        return await self._todos.get_by_space_id(space_id)

    async def update_todo_item(self, item: TodoItem) -> None:
        """Replace an item; the before image cannot be removed."""
        description = require_text(item.description, "description", "To-Do description cannot be empty.")
        if not item.before_image:
            raise DomainValidationError("before_image", "Before image is required and cannot be removed.")
        await self._todos.update(item.model_copy(update={"description": description}))

    async def complete_todo_item(self, item_id: str, after_image: str) -> TodoItem:
        """
        Attach the after image and mark the item completed.

        Raises:
            DomainValidationError: If no after image is supplied
            NotFoundError: If the item does not exist
        """
        if not after_image:
            raise DomainValidationError("after_image", "After image is required to complete a task.")
        item = await self.get_todo_item(item_id)
        done = item.model_copy(update={"after_image": after_image, "completed": True})
        await self._todos.update(done)
        logger.info(f"Completed to-do {item_id[:8]}")
        return done

    async def delete_todo_item(self, item_id: str) -> None:
        await self._todos.delete(item_id)

    async def delete_todo_items_for_space(self, space_id: str) -> int:
        return await self._todos.delete_by_space_id(space_id)
