"""Process startup and shutdown for the API.

Startup configures logging and, when BOOTSTRAP_CONTENT_TYPES is set, makes
sure those content types have a default workflow. Shutdown disposes the
SQL engine if one was created.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import Settings, get_settings
from app.infrastructure.persistence import database
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


async def _bootstrap_default_workflows(settings: Settings) -> None:
    from app.infrastructure.services.role_resolver import ConfiguredRoleResolver
    from app.infrastructure.services.workflow_bootstrap import ensure_default_workflows

    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        logger.warning("Skipping workflow bootstrap: DATABASE_URL is not set")
        return
    created = await ensure_default_workflows(
        database.AsyncSessionLocal,
        settings.bootstrap_content_types,
        settings.workflow_bootstrap_name,
        ConfiguredRoleResolver(settings.identity_role_names),
    )
    if created is None:
        logger.info("Default workflows already present for %s", settings.bootstrap_content_types)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging()
    if settings.bootstrap_content_types:
        await _bootstrap_default_workflows(settings)

    yield

    if database.engine is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
