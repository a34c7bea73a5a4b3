"""
SQLAlchemy ORM models for the OkapiFlow store.

Tables:
- store_meta: Schema name/version stamp written by the upgrade hook
- spaces: Aggregate roots, with clock-session state
- actions: Repeatable point-earning actions
- multi_step_actions: Quests; steps stored as a JSON list
- log_entries: Append-only event log (source of all point totals)
- waste_entries: TIMWOODS waste observations
- comments: Free-text notes with an optional image
- todos: Before/after visual tasks

Every child table carries ``space_id`` with a secondary index. There is no
database-level foreign key: cascading deletes are issued by SpaceService.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column

from okapiflow.db.database import Base


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class StoreMeta(Base):
    """Schema version stamp for a named store."""
    __tablename__ = "store_meta"

    store_name: Mapped[str] = mapped_column(String(100), primary_key=True)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<StoreMeta {self.store_name} v{self.schema_version}>"


class Space(Base):
    """
    A project whose improvement work is tracked.

    ``clock_in_start_time`` is set iff ``is_clocked_in`` is true;
    ``total_clocked_in_time`` is in whole minutes.
    """
    __tablename__ = "spaces"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    goal: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Images are opaque data URIs or URLs
    before_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    after_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    date_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    total_clocked_in_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Clock-session state
    is_clocked_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    clock_in_start_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Space {self.id[:8]} '{self.name[:30]}'>"


class Action(Base):
    """A repeatable activity awarding a fixed number of points."""
    __tablename__ = "actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    space_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        return f"<Action {self.id[:8]} '{self.name[:30]}' +{self.points}>"


class MultiStepAction(Base):
    """A quest: ordered steps, each worth ``points_per_step``."""
    __tablename__ = "multi_step_actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    space_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    points_per_step: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # [{"id": str, "name": str, "completed": bool}, ...]
    steps: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    current_step_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<MultiStepAction {self.id[:8]} '{self.name[:30]}' "
            f"{self.current_step_index}/{len(self.steps or [])}>"
        )


class LogEntry(Base):
    """Immutable record of one state-changing event in a Space."""
    __tablename__ = "log_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    space_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    action_name: Mapped[str] = mapped_column(String(255), nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)

    # multiStepAction entries
    multi_step_action_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    step_index: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # clockOut entries
    clock_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    clock_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    minutes_clocked_in: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<LogEntry {self.id[:8]} {self.type} '{self.action_name[:30]}' +{self.points}>"


class WasteEntry(Base):
    """One observed TIMWOODS waste, with its category weight frozen at creation."""
    __tablename__ = "waste_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    space_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(64), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<WasteEntry {self.id[:8]} {self.type} {self.points}>"


class Comment(Base):
    """A note on a Space, optionally carrying one image."""
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    space_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Comment {self.id[:8]} '{self.text[:30]}'>"


class TodoItem(Base):
    """A task documented with before/after images."""
    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    space_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    before_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    after_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        status = "done" if self.completed else "open"
        return f"<TodoItem {self.id[:8]} '{self.description[:30]}' {status}>"
