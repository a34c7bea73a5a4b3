"""
OkapiFlow runtime entry.

Opens the embedded store and hands the wired services to the presentation
layer for the lifetime of the context.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from okapiflow.config import settings
from okapiflow.db import close_store, open_store
from okapiflow.services.container import Services, build_services

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def okapiflow_app(database_url: Optional[str] = None) -> AsyncIterator[Services]:
    """Application lifespan: open the store, yield services, close the store."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    try:
        session_factory = await open_store(database_url)
    except Exception as e:
        logger.error(f"Failed to open store: {e}")
        raise

    try:
        yield build_services(session_factory)
    finally:
        logger.info("Shutting down...")
        await close_store()
