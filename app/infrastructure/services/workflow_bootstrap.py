"""Default workflow bootstrap: one default definition for content types that lack one.

Run once per process from the lifespan, or from scripts/seed_default_workflows.py.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces.services import IRoleResolver
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.domain.entities import WorkflowDefinitionEntity
from app.infrastructure.persistence.repositories.workflow_definition_repo import (
    WorkflowDefinitionRepository,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


async def ensure_default_workflows(
    session_factory: async_sessionmaker[AsyncSession],
    content_types: Iterable[str],
    name: str,
    role_resolver: IRoleResolver,
) -> WorkflowDefinitionEntity | None:
    """Create the canonical workflow as default for content types without a default.

    Returns the created definition, or None when every content type already has one.
    """
    wanted = sorted(set(content_types))
    if not wanted:
        return None
    async with session_factory() as session:
        async with session.begin():
            repo = WorkflowDefinitionRepository(session)
            await repo.lock_content_types(wanted)
            missing = [
                ct for ct in wanted if await repo.get_default_by_content_type(ct) is None
            ]
            if not missing:
                logger.info("Default workflows present for %s", ", ".join(wanted))
                return None
            service = WorkflowDefinitionService(repo, role_resolver)
            definition = await service.create_default_workflow(name, missing)
    logger.info(
        "Bootstrapped default workflow %s for %s", definition.id, ", ".join(missing)
    )
    return definition
