"""
Store module for OkapiFlow.

Provides async SQLAlchemy support with SQLite (default) or any async URL.
"""
from __future__ import annotations

from okapiflow.db.database import (
    Base,
    close_store,
    get_session,
    get_session_factory,
    open_store,
    upgrade_schema,
)
from okapiflow.db import models as models  # noqa: F401  register with Base

__all__ = [
    "Base",
    "open_store",
    "close_store",
    "get_session",
    "get_session_factory",
    "upgrade_schema",
]
