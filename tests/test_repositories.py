"""
Tests for the per-entity repositories.

Verifies:
- Generic CRUD contract (fresh ids, NotFoundError on update/delete of
  missing ids).
- Space date_modified stamping and clock-state normalization on read.
- Per-collection ordering and idempotent delete_by_space_id.
- Quest steps survive the JSON column.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from okapiflow.core.errors import NotFoundError
from okapiflow.db import models as db
from okapiflow.store import EntityStore


def _space_fields(clock) -> dict:
    return {
        "name": "Kitchen",
        "date_created": clock(),
        "date_modified": clock(),
        "total_clocked_in_time": 0,
        "is_clocked_in": False,
        "clock_in_start_time": None,
    }


# =============================================================================
# Generic contract
# =============================================================================

@pytest.mark.asyncio
async def test_add_assigns_fresh_ids(repos, clock) -> None:
    spaces = repos.create_space_repository()
    a = await spaces.add(_space_fields(clock))
    b = await spaces.add(_space_fields(clock))

    assert a.id != b.id
    assert await spaces.get_by_id(a.id) == a
    assert len(await spaces.get_all()) == 2


@pytest.mark.asyncio
async def test_get_by_id_missing_returns_none(repos) -> None:
    assert await repos.create_action_repository().get_by_id("missing") is None


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(repos, clock) -> None:
    spaces = repos.create_space_repository()
    space = await spaces.add(_space_fields(clock))
    await spaces.delete(space.id)

    with pytest.raises(NotFoundError) as exc_info:
        await spaces.update(space)
    assert exc_info.value.entity == "Space"
    assert exc_info.value.entity_id == space.id


@pytest.mark.asyncio
async def test_delete_missing_raises_not_found(repos) -> None:
    with pytest.raises(NotFoundError, match="Action with ID gone not found."):
        await repos.create_action_repository().delete("gone")


@pytest.mark.asyncio
async def test_timestamps_read_back_as_utc(repos, clock) -> None:
    spaces = repos.create_space_repository()
    space = await spaces.add(_space_fields(clock))

    stored = await spaces.get_by_id(space.id)
    assert stored is not None
    assert stored.date_created.tzinfo is not None
    assert stored.date_created == clock()


# =============================================================================
# Spaces
# =============================================================================

@pytest.mark.asyncio
async def test_space_update_always_stamps_date_modified(repos, clock) -> None:
    spaces = repos.create_space_repository()
    space = await spaces.add(_space_fields(clock))

    later = clock.advance(minutes=5)
    await spaces.update(space.model_copy(update={"goal": "Tidy"}))

    stored = await spaces.get_by_id(space.id)
    assert stored.goal == "Tidy"
    assert stored.date_modified == later
    assert stored.date_created == space.date_created


@pytest.mark.asyncio
async def test_space_touch(repos, clock) -> None:
    spaces = repos.create_space_repository()
    space = await spaces.add(_space_fields(clock))

    later = clock.advance(seconds=30)
    touched = await spaces.touch(space.id)
    assert touched is not None
    assert touched.date_modified == later
    assert await spaces.touch("missing") is None


@pytest.mark.asyncio
async def test_inconsistent_clock_state_reads_as_clocked_out(repos, session_factory, clock) -> None:
    rows = EntityStore(session_factory, db.Space)
    await rows.put(db.Space(
        id="s-bad",
        name="Shed",
        date_created=clock(),
        date_modified=clock(),
        total_clocked_in_time=10,
        is_clocked_in=True,
        clock_in_start_time=None,
    ))

    space = await repos.create_space_repository().get_by_id("s-bad")
    assert space is not None
    assert space.is_clocked_in is False
    assert space.clock_in_start_time is None


# =============================================================================
# Space children
# =============================================================================

@pytest.mark.asyncio
async def test_log_entries_newest_first(repos, clock) -> None:
    logs = repos.create_log_entry_repository()
    first = await logs.add({"space_id": "s1", "timestamp": clock(), "action_name": "A", "points": 1, "type": "action"})
    clock.advance(minutes=1)
    second = await logs.add({"space_id": "s1", "timestamp": clock(), "action_name": "B", "points": 2, "type": "action"})
    await logs.add({"space_id": "s2", "timestamp": clock(), "action_name": "C", "points": 3, "type": "action"})

    assert [e.id for e in await logs.get_by_space_id("s1")] == [second.id, first.id]


@pytest.mark.asyncio
async def test_todos_oldest_first(repos, clock) -> None:
    todos = repos.create_todo_repository()
    ids = []
    for description in ("one", "two", "three"):
        item = await todos.add({
            "space_id": "s1",
            "description": description,
            "completed": False,
            "before_image": "data:image/png;base64,AAAA",
            "date_created": clock(),
        })
        ids.append(item.id)
        clock.advance(minutes=1)

    assert [t.id for t in await todos.get_by_space_id("s1")] == ids


@pytest.mark.asyncio
async def test_delete_by_space_id_is_idempotent(repos) -> None:
    actions = repos.create_action_repository()
    await actions.add({"space_id": "s1", "name": "Sweep", "points": 1})
    await actions.add({"space_id": "s1", "name": "Mop", "points": 2})

    assert await actions.delete_by_space_id("s1") == 2
    assert await actions.delete_by_space_id("s1") == 0
    assert await actions.get_by_space_id("s1") == []


@pytest.mark.asyncio
async def test_quest_steps_round_trip(repos) -> None:
    quests = repos.create_multi_step_action_repository()
    quest = await quests.add({
        "space_id": "s1",
        "name": "Reorganize",
        "points_per_step": 3,
        "current_step_index": 1,
        "steps": [
            {"id": "st1", "name": "Empty", "completed": True},
            {"id": "st2", "name": "Sort", "completed": False},
        ],
    })

    stored = await quests.get_by_id(quest.id)
    assert stored == quest
    assert [s.name for s in stored.steps] == ["Empty", "Sort"]
    assert stored.current_step is not None
    assert stored.current_step.id == "st2"


@pytest.mark.asyncio
async def test_waste_entry_round_trip(repos) -> None:
    waste = repos.create_waste_entry_repository()
    when = datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc)
    entry = await waste.add({"space_id": "s1", "timestamp": when, "type": "Waiting", "points": 4})

    assert await waste.get_by_id(entry.id) == entry
