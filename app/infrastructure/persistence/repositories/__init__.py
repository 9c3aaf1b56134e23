"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.content_item_repo import (
    ContentItemRepository,
)
from app.infrastructure.persistence.repositories.workflow_definition_repo import (
    WorkflowDefinitionRepository,
)

__all__ = [
    "BaseRepository",
    "ContentItemRepository",
    "WorkflowDefinitionRepository",
]
