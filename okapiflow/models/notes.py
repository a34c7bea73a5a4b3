"""Comment and to-do models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from okapiflow.models.base import CamelModel


class CommentCreate(CamelModel):
    space_id: str
    text: str = ""
    image_url: Optional[str] = None


class Comment(CamelModel):
    id: str
    space_id: str
    text: str = ""
    image_url: Optional[str] = None
    timestamp: datetime


class TodoItemCreate(CamelModel):
    space_id: str
    description: str = ""
    before_image: Optional[str] = None
    after_image: Optional[str] = None


class TodoItem(CamelModel):
    """
    A visual task. ``before_image`` is captured at creation; completing the
    task supplies ``after_image`` and sets ``completed``.
    """
    id: str
    space_id: str
    description: str
    completed: bool = False
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    date_created: datetime
