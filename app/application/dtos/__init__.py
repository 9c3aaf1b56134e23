"""Application DTOs (no ORM dependency)."""

from app.application.dtos.workflow import (
    DefinitionValidationResult,
    TransitionResult,
    WorkflowAnalyticsResult,
    WorkflowBottleneck,
)

__all__ = [
    "DefinitionValidationResult",
    "TransitionResult",
    "WorkflowAnalyticsResult",
    "WorkflowBottleneck",
]
