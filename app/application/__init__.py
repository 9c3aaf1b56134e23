"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, role lookup, notifications).
"""

from app.application.interfaces import (
    IActorRoleSource,
    IContentItemRepository,
    INotificationDispatcher,
    IRoleResolver,
    IWorkflowDefinitionRepository,
)
from app.application.services import (
    WorkflowAnalyticsService,
    WorkflowDefinitionService,
    WorkflowPermissionEvaluator,
)
from app.application.use_cases import ContentItemService, TransitionExecutor

__all__ = [
    "ContentItemService",
    "IActorRoleSource",
    "IContentItemRepository",
    "INotificationDispatcher",
    "IRoleResolver",
    "IWorkflowDefinitionRepository",
    "TransitionExecutor",
    "WorkflowAnalyticsService",
    "WorkflowDefinitionService",
    "WorkflowPermissionEvaluator",
]
