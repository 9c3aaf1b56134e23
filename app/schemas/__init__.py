"""Pydantic request/response schemas for the API."""

from app.schemas.content import (
    ContentItemCreateRequest,
    ContentItemResponse,
    TransitionExecuteRequest,
    TransitionResultResponse,
    WorkflowHistoryResponse,
)
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.workflow import (
    CreateDefaultWorkflowRequest,
    DefinitionValidationResponse,
    WorkflowAnalyticsResponse,
    WorkflowDefinitionListItem,
    WorkflowDefinitionRequest,
    WorkflowDefinitionResponse,
    WorkflowRoleSchema,
    WorkflowStateSchema,
    WorkflowTransitionSchema,
)

__all__ = [
    "ContentItemCreateRequest",
    "ContentItemResponse",
    "CreateDefaultWorkflowRequest",
    "DefinitionValidationResponse",
    "HealthResponse",
    "ReadinessResponse",
    "TransitionExecuteRequest",
    "TransitionResultResponse",
    "WorkflowAnalyticsResponse",
    "WorkflowDefinitionListItem",
    "WorkflowDefinitionRequest",
    "WorkflowDefinitionResponse",
    "WorkflowHistoryResponse",
    "WorkflowRoleSchema",
    "WorkflowStateSchema",
    "WorkflowTransitionSchema",
]
