"""Application services: permission evaluation, validation, definitions, analytics."""

from app.application.services.default_workflow import build_default_workflow
from app.application.services.workflow_analytics_service import WorkflowAnalyticsService
from app.application.services.workflow_definition_service import (
    WorkflowDefinitionService,
    normalize_role_grants,
)
from app.application.services.workflow_definition_validator import validate_definition
from app.application.services.workflow_permission_evaluator import (
    WorkflowPermissionEvaluator,
)

__all__ = [
    "WorkflowAnalyticsService",
    "WorkflowDefinitionService",
    "WorkflowPermissionEvaluator",
    "build_default_workflow",
    "normalize_role_grants",
    "validate_definition",
]
