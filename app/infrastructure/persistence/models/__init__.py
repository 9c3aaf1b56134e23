"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.content import (
    ContentWorkflowItem,
    WorkflowHistory,
)
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampedModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.workflow import (
    WorkflowDefinition,
    WorkflowRole,
    WorkflowRolePermission,
    WorkflowState,
    WorkflowTransition,
)

__all__ = [
    "ContentWorkflowItem",
    "CuidMixin",
    "TimestampMixin",
    "TimestampedModel",
    "WorkflowDefinition",
    "WorkflowHistory",
    "WorkflowRole",
    "WorkflowRolePermission",
    "WorkflowState",
    "WorkflowTransition",
]
