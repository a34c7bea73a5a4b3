"""
OkapiFlow: a personal process-improvement tracker.

Spaces group repeatable Actions, multi-step quests, TIMWOODS waste, comments
and visual to-dos. Points are earned by logging work and every total is
derived from the append-only logs.
"""
from __future__ import annotations

from okapiflow.core.errors import (
    CascadeError,
    DomainValidationError,
    NotFoundError,
    OkapiFlowError,
    SchemaVersionError,
)
from okapiflow.core.space_context import SpaceContext
from okapiflow.services.container import Services, build_services

__all__ = [
    "CascadeError",
    "DomainValidationError",
    "NotFoundError",
    "OkapiFlowError",
    "SchemaVersionError",
    "Services",
    "SpaceContext",
    "build_services",
]
