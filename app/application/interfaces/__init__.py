"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IContentItemRepository,
    IWorkflowDefinitionRepository,
)
from app.application.interfaces.services import (
    IActorRoleSource,
    INotificationDispatcher,
    IRoleResolver,
)

__all__ = [
    "IActorRoleSource",
    "IContentItemRepository",
    "INotificationDispatcher",
    "IRoleResolver",
    "IWorkflowDefinitionRepository",
]
