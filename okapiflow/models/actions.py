"""
Action and quest models.

An Action is a single repeatable activity. A MultiStepAction ("quest") is an
ordered list of steps completed strictly in order:

- ``current_step_index`` is the next step to complete (0-based)
- steps before the cursor are completed, steps at or after it are not
- the quest is complete when the cursor equals ``len(steps)``
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from okapiflow.models.base import CamelModel


class ActionCreate(CamelModel):
    space_id: str
    name: str = ""
    description: Optional[str] = None
    points: int = 1


class Action(CamelModel):
    """A stored Action."""
    id: str
    space_id: str
    name: str
    description: Optional[str] = None
    points: int = Field(..., ge=1)


class StepCreate(CamelModel):
    name: str


class ActionStep(CamelModel):
    """One step of a quest."""
    id: str
    name: str
    completed: bool = False


class MultiStepActionCreate(CamelModel):
    space_id: str
    name: str = ""
    description: Optional[str] = None
    points_per_step: int = 1
    steps: list[StepCreate] = Field(default_factory=list)


class MultiStepAction(CamelModel):
    """A stored quest."""
    id: str
    space_id: str
    name: str
    description: Optional[str] = None
    points_per_step: int = Field(..., ge=1)
    steps: list[ActionStep] = Field(default_factory=list)
    current_step_index: int = Field(default=0, ge=0)

    @property
    def is_complete(self) -> bool:
        return self.current_step_index >= len(self.steps)

    @property
    def current_step(self) -> ActionStep | None:
        """The next step to complete, or None once the quest is complete."""
        if self.is_complete:
            return None
        return self.steps[self.current_step_index]
