"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.content import (
    ContentWorkflowItemEntity,
    WorkflowHistoryEntry,
)
from app.domain.entities.workflow import (
    WorkflowDefinitionEntity,
    WorkflowRoleEntity,
    WorkflowRolePermissionEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)

__all__ = [
    "ContentWorkflowItemEntity",
    "WorkflowDefinitionEntity",
    "WorkflowHistoryEntry",
    "WorkflowRoleEntity",
    "WorkflowRolePermissionEntity",
    "WorkflowStateEntity",
    "WorkflowTransitionEntity",
]
