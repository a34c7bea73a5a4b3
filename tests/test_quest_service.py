"""Tests for MultiStepActionService (quests)."""
from __future__ import annotations

import pytest

from okapiflow.core.errors import DomainValidationError, NotFoundError
from okapiflow.models.actions import MultiStepActionCreate, StepCreate


def _create(space_id: str, *names: str, points_per_step: int = 3) -> MultiStepActionCreate:
    return MultiStepActionCreate(
        space_id=space_id,
        name="Reorganize shelf",
        points_per_step=points_per_step,
        steps=[StepCreate(name=n) for n in names],
    )


class TestCreateQuest:

    @pytest.mark.asyncio
    async def test_creates_open_quest(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(_create(space.id, "Empty", "Sort", "Label"))

        assert quest.current_step_index == 0
        assert [s.name for s in quest.steps] == ["Empty", "Sort", "Label"]
        assert not any(s.completed for s in quest.steps)
        assert len({s.id for s in quest.steps}) == 3
        assert await services.quests.get_multi_step_action(quest.id) == quest

    @pytest.mark.asyncio
    async def test_requires_steps(self, services, space) -> None:
        with pytest.raises(DomainValidationError) as exc_info:
            await services.quests.create_multi_step_action(_create(space.id))
        assert exc_info.value.field == "steps"

    @pytest.mark.asyncio
    async def test_requires_step_names(self, services, space) -> None:
        with pytest.raises(DomainValidationError):
            await services.quests.create_multi_step_action(_create(space.id, "Empty", "  "))

    @pytest.mark.asyncio
    async def test_non_positive_points_become_one(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(
            _create(space.id, "Empty", points_per_step=0)
        )
        assert quest.points_per_step == 1


class TestProgress:

    @pytest.mark.asyncio
    async def test_advance_persists(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(_create(space.id, "Empty", "Sort"))

        advanced, step = await services.quests.advance_current_step(quest.id)
        assert step is not None and step.name == "Empty"

        stored = await services.quests.get_multi_step_action(quest.id)
        assert stored == advanced
        assert stored.current_step_index == 1
        assert [s.completed for s in stored.steps] == [True, False]

    @pytest.mark.asyncio
    async def test_complete_quest_unchanged(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(_create(space.id, "Only"))
        done = await services.quests.complete_current_step(quest.id)
        assert done.is_complete

        again, step = await services.quests.advance_current_step(quest.id)
        assert step is None
        assert again == done

    @pytest.mark.asyncio
    async def test_advance_missing_quest(self, services) -> None:
        with pytest.raises(NotFoundError):
            await services.quests.advance_current_step("missing")

    @pytest.mark.asyncio
    async def test_advance_rejects_cursor_past_end(self, services, repos, space) -> None:
        quest = await repos.create_multi_step_action_repository().add({
            "space_id": space.id,
            "name": "Corrupt",
            "points_per_step": 2,
            "current_step_index": 5,
            "steps": [
                {"id": "st1", "name": "A", "completed": True},
                {"id": "st2", "name": "B", "completed": True},
            ],
        })

        with pytest.raises(DomainValidationError) as exc_info:
            await services.quests.advance_current_step(quest.id)
        assert exc_info.value.field == "current_step_index"
        assert await services.quests.get_multi_step_action(quest.id) == quest

    @pytest.mark.asyncio
    async def test_advance_rejects_flags_out_of_step_with_cursor(self, services, repos, space) -> None:
        quest = await repos.create_multi_step_action_repository().add({
            "space_id": space.id,
            "name": "Corrupt",
            "points_per_step": 2,
            "current_step_index": 0,
            "steps": [{"id": "st1", "name": "A", "completed": True}],
        })

        with pytest.raises(DomainValidationError):
            await services.quests.advance_current_step(quest.id)


class TestEditQuest:

    @pytest.mark.asyncio
    async def test_update_aligns_flags_with_cursor(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(_create(space.id, "A", "B", "C"))
        stored = await services.quests.update_multi_step_action(
            quest.model_copy(update={"current_step_index": 2, "name": " Renamed "})
        )

        assert stored.name == "Renamed"
        assert [s.completed for s in stored.steps] == [True, True, False]
        assert await services.quests.get_multi_step_action(quest.id) == stored

    @pytest.mark.asyncio
    async def test_update_rejects_cursor_out_of_range(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(_create(space.id, "A"))
        with pytest.raises(DomainValidationError) as exc_info:
            await services.quests.update_multi_step_action(
                quest.model_copy(update={"current_step_index": 5})
            )
        assert exc_info.value.field == "current_step_index"

    @pytest.mark.asyncio
    async def test_delete_quest(self, services, space) -> None:
        quest = await services.quests.create_multi_step_action(_create(space.id, "A"))
        await services.quests.delete_multi_step_action(quest.id)
        assert await services.quests.get_multi_step_actions_for_space(space.id) == []
