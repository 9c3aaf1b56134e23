"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the acting user and application
services. All services are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.

Read routes use get_db; writes use get_db_transactional (commit on success).
The transition executor takes a plain get_db session and manages its own
transaction so it can notify after commit.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import (
    IActorRoleSource,
    INotificationDispatcher,
    IRoleResolver,
)
from app.application.services.workflow_analytics_service import WorkflowAnalyticsService
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
)
from app.application.use_cases.workflows import ContentItemService, TransitionExecutor
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    ContentItemRepository,
    WorkflowDefinitionRepository,
)
from app.infrastructure.services import (
    ConfiguredRoleResolver,
    ContextActorRoleSource,
    LogOnlyNotificationDispatcher,
    WorkflowTemplateRenderer,
)
from app.shared.context import ActorContext, get_actor_context


# ---- Identity and collaborators ----


async def get_current_actor() -> ActorContext:
    """Acting user for this request (set by ActorContextMiddleware)."""
    return get_actor_context()


def get_actor_role_source() -> IActorRoleSource:
    return ContextActorRoleSource()


def get_role_resolver() -> IRoleResolver:
    """Role resolver over the configured identity roles (composition root)."""
    return ConfiguredRoleResolver(get_settings().identity_role_names)


def get_notifier() -> INotificationDispatcher:
    """Notification dispatcher (log-only until a mail transport is wired)."""
    settings = get_settings()
    renderer = WorkflowTemplateRenderer(
        default_subject=settings.notification_default_subject
    )
    return LogOnlyNotificationDispatcher(renderer)


# ---- Repositories ----


async def get_definition_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowDefinitionRepository:
    return WorkflowDefinitionRepository(db)


async def get_definition_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowDefinitionRepository:
    return WorkflowDefinitionRepository(db)


async def get_content_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContentItemRepository:
    return ContentItemRepository(db)


async def get_content_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ContentItemRepository:
    return ContentItemRepository(db)


# ---- Services ----


async def get_definition_service(
    repo: Annotated[WorkflowDefinitionRepository, Depends(get_definition_repo)],
    role_resolver: Annotated[IRoleResolver, Depends(get_role_resolver)],
) -> WorkflowDefinitionService:
    return WorkflowDefinitionService(repo, role_resolver)


async def get_definition_service_for_write(
    repo: Annotated[WorkflowDefinitionRepository, Depends(get_definition_repo_for_write)],
    role_resolver: Annotated[IRoleResolver, Depends(get_role_resolver)],
) -> WorkflowDefinitionService:
    return WorkflowDefinitionService(repo, role_resolver)


async def get_content_item_service(
    definitions: Annotated[WorkflowDefinitionService, Depends(get_definition_service)],
    content_repo: Annotated[ContentItemRepository, Depends(get_content_repo)],
) -> ContentItemService:
    return ContentItemService(definitions, content_repo)


async def get_content_item_service_for_write(
    definitions: Annotated[
        WorkflowDefinitionService, Depends(get_definition_service_for_write)
    ],
    content_repo: Annotated[ContentItemRepository, Depends(get_content_repo_for_write)],
) -> ContentItemService:
    return ContentItemService(definitions, content_repo)


async def get_analytics_service(
    definition_repo: Annotated[WorkflowDefinitionRepository, Depends(get_definition_repo)],
    content_repo: Annotated[ContentItemRepository, Depends(get_content_repo)],
) -> WorkflowAnalyticsService:
    threshold = timedelta(hours=get_settings().analytics_bottleneck_hours)
    return WorkflowAnalyticsService(definition_repo, content_repo, threshold)


async def get_transition_executor(
    db: Annotated[AsyncSession, Depends(get_db)],
    role_resolver: Annotated[IRoleResolver, Depends(get_role_resolver)],
    notifier: Annotated[INotificationDispatcher, Depends(get_notifier)],
) -> TransitionExecutor:
    """Executor on a plain session; it opens and commits its own transaction."""
    definitions = WorkflowDefinitionService(WorkflowDefinitionRepository(db), role_resolver)
    return TransitionExecutor(db, definitions, ContentItemRepository(db), notifier)
