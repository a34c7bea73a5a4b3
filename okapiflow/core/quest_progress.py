"""
Quest step progression.

A quest's state is its cursor ``current_step_index`` in ``[0, len(steps)]``.
The only transition is "complete the current step":

    i  ──complete──▶  i + 1      (0 <= i < len(steps))
    n  ──complete──▶  n          (n == len(steps): terminal, absorbing)

Invariants:
    1. 0 <= current_step_index <= len(steps)
    2. step k is completed iff k < current_step_index
    3. No skipping, no re-opening, no partial progress.
"""

from __future__ import annotations

import logging

from okapiflow.models.actions import ActionStep, MultiStepAction

logger = logging.getLogger(__name__)


class QuestProgressError(ValueError):
    """Raised when a quest's cursor or step flags violate the invariants."""

    def __init__(self, quest_id: str, reason: str):
        self.quest_id = quest_id
        self.reason = reason
        super().__init__(f"Quest {quest_id}: {reason}")


def is_complete(quest: MultiStepAction) -> bool:
    """Check if the quest is in its terminal state."""
    return quest.current_step_index >= len(quest.steps)


def check_progress(quest: MultiStepAction) -> None:
    """
    Validate both invariants.

    Raises QuestProgressError on the first violation found.
    """
    if not 0 <= quest.current_step_index <= len(quest.steps):
        raise QuestProgressError(
            quest.id,
            f"current step index {quest.current_step_index} outside [0, {len(quest.steps)}]",
        )
    for k, step in enumerate(quest.steps):
        if step.completed != (k < quest.current_step_index):
            raise QuestProgressError(
                quest.id,
                f"step {k} completed={step.completed} disagrees with cursor "
                f"{quest.current_step_index}",
            )


def align_steps(quest: MultiStepAction) -> MultiStepAction:
    """Return a copy whose step flags agree with the cursor.

    Used for explicit edits, where the cursor is authoritative.
    """
    steps = [
        step.model_copy(update={"completed": k < quest.current_step_index})
        for k, step in enumerate(quest.steps)
    ]
    return quest.model_copy(update={"steps": steps})


def advance(quest: MultiStepAction) -> tuple[MultiStepAction, ActionStep | None]:
    """
    Complete the current step.

    Returns the new quest state and the step that was just completed, or the
    unchanged quest and None when it is already complete.
    """
    if is_complete(quest):
        logger.warning(f"Multi-step action {quest.id} is already completed.")
        return quest, None

    index = quest.current_step_index
    done = quest.steps[index].model_copy(update={"completed": True})
    steps = list(quest.steps)
    steps[index] = done
    advanced = quest.model_copy(
        update={"steps": steps, "current_step_index": index + 1}
    )
    logger.info(
        f"Quest {quest.id[:8]}: step {index} '{done.name}' completed "
        f"({index + 1}/{len(steps)})"
    )
    return advanced, done
