"""Tests for CommentService and TodoService."""
from __future__ import annotations

import pytest

from okapiflow.core.errors import DomainValidationError, NotFoundError
from okapiflow.models.notes import CommentCreate, TodoItemCreate

BEFORE = "data:image/png;base64,QkVGT1JF"
AFTER = "data:image/png;base64,QUZURVI="


class TestComments:

    @pytest.mark.asyncio
    async def test_text_comment(self, services, space, clock) -> None:
        comment = await services.comments.add_comment(CommentCreate(space_id=space.id, text=" Looks better "))
        assert comment.text == "Looks better"
        assert comment.image_url is None
        assert comment.timestamp == clock()

    @pytest.mark.asyncio
    async def test_image_only_comment(self, services, space) -> None:
        comment = await services.comments.add_comment(CommentCreate(space_id=space.id, image_url=BEFORE))
        assert comment.text == ""
        assert comment.image_url == BEFORE

    @pytest.mark.asyncio
    async def test_empty_comment_rejected(self, services, space) -> None:
        with pytest.raises(DomainValidationError):
            await services.comments.add_comment(CommentCreate(space_id=space.id, text="  "))

    @pytest.mark.asyncio
    async def test_newest_first(self, services, space, clock) -> None:
        first = await services.comments.add_comment(CommentCreate(space_id=space.id, text="one"))
        clock.advance(minutes=1)
        second = await services.comments.add_comment(CommentCreate(space_id=space.id, text="two"))

        assert await services.comments.get_comments_for_space(space.id) == [second, first]

        await services.comments.delete_comment(first.id)
        assert await services.comments.get_comments_for_space(space.id) == [second]


class TestTodos:

    @pytest.mark.asyncio
    async def test_create_requires_before_image(self, services, space) -> None:
        with pytest.raises(DomainValidationError) as exc_info:
            await services.todos.create_todo_item(TodoItemCreate(space_id=space.id, description="Clear bench"))
        assert exc_info.value.field == "before_image"

    @pytest.mark.asyncio
    async def test_create_requires_description(self, services, space) -> None:
        with pytest.raises(DomainValidationError) as exc_info:
            await services.todos.create_todo_item(TodoItemCreate(space_id=space.id, before_image=BEFORE))
        assert exc_info.value.field == "description"

    @pytest.mark.asyncio
    async def test_complete_sets_after_image(self, services, space) -> None:
        item = await services.todos.create_todo_item(
            TodoItemCreate(space_id=space.id, description="Clear bench", before_image=BEFORE)
        )
        assert item.completed is False

        done = await services.todos.complete_todo_item(item.id, AFTER)
        assert done.completed is True
        assert done.after_image == AFTER
        assert done.before_image == BEFORE
        assert await services.todos.get_todo_item(item.id) == done

    @pytest.mark.asyncio
    async def test_complete_requires_after_image(self, services, space) -> None:
        item = await services.todos.create_todo_item(
            TodoItemCreate(space_id=space.id, description="Clear bench", before_image=BEFORE)
        )
        with pytest.raises(DomainValidationError):
            await services.todos.complete_todo_item(item.id, "")

    @pytest.mark.asyncio
    async def test_before_image_cannot_be_removed(self, services, space) -> None:
        item = await services.todos.create_todo_item(
            TodoItemCreate(space_id=space.id, description="Clear bench", before_image=BEFORE)
        )
        with pytest.raises(DomainValidationError):
            await services.todos.update_todo_item(item.model_copy(update={"before_image": None}))

        await services.todos.update_todo_item(item.model_copy(update={"description": "Clear the bench"}))
        assert (await services.todos.get_todo_item(item.id)).description == "Clear the bench"

    @pytest.mark.asyncio
    async def test_missing_item(self, services) -> None:
        with pytest.raises(NotFoundError):
            await services.todos.complete_todo_item("missing", AFTER)
