"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.role_resolver import (
    ConfiguredRoleResolver,
    ContextActorRoleSource,
)
from app.infrastructure.services.workflow_notification_service import (
    LogOnlyNotificationDispatcher,
)
from app.infrastructure.services.workflow_template_renderer import (
    WorkflowTemplateRenderer,
)

__all__ = [
    "ConfiguredRoleResolver",
    "ContextActorRoleSource",
    "LogOnlyNotificationDispatcher",
    "WorkflowTemplateRenderer",
]
