"""Comment (newest first) and to-do (oldest first) repositories."""

from __future__ import annotations

from typing import Any

from okapiflow.db import models as db
from okapiflow.models.notes import Comment, TodoItem
from okapiflow.repositories.base import SpaceChildRepository


class CommentRepository(SpaceChildRepository[Comment, db.Comment]):
    entity_name = "Comment"
    model_type = Comment
    row_type = db.Comment

    def _order_by(self) -> Any:
        return db.Comment.timestamp.desc()


class TodoRepository(SpaceChildRepository[TodoItem, db.TodoItem]):
    entity_name = "TodoItem"
    model_type = TodoItem
    row_type = db.TodoItem

    def _order_by(self) -> Any:
        return db.TodoItem.date_created.asc()
