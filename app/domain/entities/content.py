"""Content item under workflow control, and its transition history."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ContentWorkflowItemEntity:
    """A piece of content with exactly one active workflow state."""

    id: str
    content_type: str
    title: str
    owner_id: str | None
    workflow_definition_id: str | None
    workflow_state: str
    last_reviewer_id: str | None = None
    last_reviewed_at: datetime | None = None
    review_comment: str | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_owned_by(self, actor_id: str | None) -> bool:
        """Return whether actor_id is the owner (never true for anonymous actors)."""
        return actor_id is not None and self.owner_id == actor_id


@dataclass(frozen=True)
class WorkflowHistoryEntry:
    """One executed transition (append-only)."""

    id: str
    content_item_id: str
    workflow_definition_id: str | None
    transition_id: str | None
    transition_name: str
    from_state_key: str
    to_state_key: str
    actor_id: str | None
    comment: str | None
    created_at: datetime
