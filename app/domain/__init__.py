"""Domain layer: entities, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    ContentWorkflowItemEntity,
    WorkflowDefinitionEntity,
    WorkflowHistoryEntry,
    WorkflowRoleEntity,
    WorkflowRolePermissionEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)
from app.domain.exceptions import (
    AuthorizationException,
    CommentRequiredException,
    ConcurrencyConflictException,
    ResourceNotFoundException,
    ValidationException,
    WorkflowEngineException,
    WorkflowNotFoundException,
    WorkflowValidationException,
)
from app.domain.value_objects import RolePriority, StateKey

__all__ = [
    # Entities
    "ContentWorkflowItemEntity",
    "WorkflowDefinitionEntity",
    "WorkflowHistoryEntry",
    "WorkflowRoleEntity",
    "WorkflowRolePermissionEntity",
    "WorkflowStateEntity",
    "WorkflowTransitionEntity",
    # Exceptions
    "AuthorizationException",
    "CommentRequiredException",
    "ConcurrencyConflictException",
    "ResourceNotFoundException",
    "ValidationException",
    "WorkflowEngineException",
    "WorkflowNotFoundException",
    "WorkflowValidationException",
    # Value objects
    "RolePriority",
    "StateKey",
]
