"""Repository interfaces (ports) for the application layer.

Protocols define persistence contracts; infrastructure implements them
(SQLAlchemy in production, in-memory fakes in tests).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from app.domain.entities import (
    ContentWorkflowItemEntity,
    WorkflowDefinitionEntity,
    WorkflowHistoryEntry,
    WorkflowRoleEntity,
    WorkflowStateEntity,
    WorkflowTransitionEntity,
)


class IWorkflowDefinitionRepository(Protocol):
    """Protocol for the workflow definition store (definition + owned children)."""

    async def get_by_id(self, definition_id: str) -> WorkflowDefinitionEntity | None:
        """Return the definition with states, transitions (with grants) and roles, or None."""

    async def get_all(self, include_inactive: bool = True) -> list[WorkflowDefinitionEntity]:
        """Return all definitions ordered by name."""

    async def get_by_content_type(
        self, content_type: str
    ) -> list[WorkflowDefinitionEntity]:
        """Return active definitions whose content types include content_type."""

    async def get_default_by_content_type(
        self, content_type: str
    ) -> WorkflowDefinitionEntity | None:
        """Return the active default definition for content_type, or None."""

    async def save(self, definition: WorkflowDefinitionEntity) -> WorkflowDefinitionEntity:
        """Upsert by id and reconcile children by id diff; return the stored definition."""

    async def delete(self, definition_id: str) -> bool:
        """Delete the definition and all children. Return False if it did not exist."""

    async def lock_content_types(self, content_types: Iterable[str]) -> None:
        """Serialize default selection for these content types until the transaction ends."""

    async def clear_other_defaults(
        self, definition_id: str, content_types: Iterable[str]
    ) -> list[str]:
        """Unset is_default on other active definitions sharing a content type; return their ids."""

    async def get_state_by_id(self, state_id: str) -> WorkflowStateEntity | None:
        """Return a state by id, or None."""

    async def get_transition_by_id(
        self, transition_id: str
    ) -> WorkflowTransitionEntity | None:
        """Return a transition (with grants) by id, or None."""

    async def get_role_by_id(self, role_id: str) -> WorkflowRoleEntity | None:
        """Return a role by id, or None."""


class IContentItemRepository(Protocol):
    """Protocol for content items under workflow control and their history."""

    async def get_by_id(self, content_id: str) -> ContentWorkflowItemEntity | None:
        """Return the content item, or None."""

    async def create(
        self,
        *,
        content_type: str,
        title: str,
        owner_id: str | None,
        workflow_definition_id: str,
        workflow_state: str,
    ) -> ContentWorkflowItemEntity:
        """Insert a content item in its initial state."""

    async def compare_and_set_state(
        self,
        content_id: str,
        *,
        expected_state: str,
        new_state: str,
        reviewer_id: str | None,
        reviewed_at: datetime,
        comment: str | None,
        published_at: datetime | None,
    ) -> bool:
        """Set state and audit fields only if the stored state equals expected_state.

        Returns False (no change) when another writer moved the item first.
        """

    async def add_history(
        self,
        *,
        content_item_id: str,
        workflow_definition_id: str | None,
        transition_id: str | None,
        transition_name: str,
        from_state_key: str,
        to_state_key: str,
        actor_id: str | None,
        comment: str | None,
        created_at: datetime,
    ) -> WorkflowHistoryEntry:
        """Append a history row."""

    async def list_history(self, content_id: str) -> list[WorkflowHistoryEntry]:
        """Return the item's history, oldest first."""

    async def count_by_state(self, definition_id: str) -> dict[str, int]:
        """Return {state_key: item count} for items governed by definition_id."""

    async def list_history_for_definition(
        self,
        definition_id: str,
        from_date: datetime,
        to_date: datetime,
    ) -> list[WorkflowHistoryEntry]:
        """Return history rows for the definition within [from_date, to_date], oldest first."""
