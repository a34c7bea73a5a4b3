"""Action and quest repositories (unordered by space)."""

from __future__ import annotations

from okapiflow.db import models as db
from okapiflow.models.actions import Action, MultiStepAction
from okapiflow.repositories.base import SpaceChildRepository


class ActionRepository(SpaceChildRepository[Action, db.Action]):
    entity_name = "Action"
    model_type = Action
    row_type = db.Action


class MultiStepActionRepository(SpaceChildRepository[MultiStepAction, db.MultiStepAction]):
    entity_name = "MultiStepAction"
    model_type = MultiStepAction
    row_type = db.MultiStepAction
