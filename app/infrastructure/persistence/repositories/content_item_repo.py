"""Content item repository (implements IContentItemRepository): items, state CAS, history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import ContentWorkflowItemEntity, WorkflowHistoryEntry
from app.infrastructure.persistence.models.content import (
    ContentWorkflowItem,
    WorkflowHistory,
)
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now


def _item_to_entity(c: ContentWorkflowItem) -> ContentWorkflowItemEntity:
    return ContentWorkflowItemEntity(
        id=c.id,
        content_type=c.content_type,
        title=c.title,
        owner_id=c.owner_id,
        workflow_definition_id=c.workflow_definition_id,
        workflow_state=c.workflow_state,
        last_reviewer_id=c.last_reviewer_id,
        last_reviewed_at=ensure_utc(c.last_reviewed_at),
        review_comment=c.review_comment,
        published_at=ensure_utc(c.published_at),
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at),
    )


def _history_to_entity(h: WorkflowHistory) -> WorkflowHistoryEntry:
    return WorkflowHistoryEntry(
        id=h.id,
        content_item_id=h.content_item_id,
        workflow_definition_id=h.workflow_definition_id,
        transition_id=h.transition_id,
        transition_name=h.transition_name,
        from_state_key=h.from_state_key,
        to_state_key=h.to_state_key,
        actor_id=h.actor_id,
        comment=h.comment,
        created_at=ensure_utc(h.created_at),
    )


class ContentItemRepository(BaseRepository[ContentWorkflowItem]):
    """Content items under workflow control and their append-only history."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ContentWorkflowItem)

    async def get_by_id(self, content_id: str) -> ContentWorkflowItemEntity | None:
        # Always re-read: state only changes through compare_and_set_state (bulk UPDATE).
        row = await self._get_row(content_id, refresh=True)
        return _item_to_entity(row) if row else None

    async def create(
        self,
        *,
        content_type: str,
        title: str,
        owner_id: str | None,
        workflow_definition_id: str,
        workflow_state: str,
    ) -> ContentWorkflowItemEntity:
        row = await self._add(
            ContentWorkflowItem(
                content_type=content_type,
                title=title,
                owner_id=owner_id,
                workflow_definition_id=workflow_definition_id,
                workflow_state=workflow_state,
            )
        )
        return _item_to_entity(row)

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
        """UPDATE ... WHERE id = :id AND workflow_state = :expected; False when no row matched."""
        result = await self.db.execute(
            update(ContentWorkflowItem)
            .where(
                ContentWorkflowItem.id == content_id,
                ContentWorkflowItem.workflow_state == expected_state,
            )
            .values(
                workflow_state=new_state,
                last_reviewer_id=reviewer_id,
                last_reviewed_at=reviewed_at,
                review_comment=comment,
                published_at=published_at,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

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
        row = WorkflowHistory(
            content_item_id=content_item_id,
            workflow_definition_id=workflow_definition_id,
            transition_id=transition_id,
            transition_name=transition_name,
            from_state_key=from_state_key,
            to_state_key=to_state_key,
            actor_id=actor_id,
            comment=comment,
            created_at=created_at,
        )
        self.db.add(row)
        await self.db.flush()
        return _history_to_entity(row)

    async def list_history(self, content_id: str) -> list[WorkflowHistoryEntry]:
        result = await self.db.execute(
            select(WorkflowHistory)
            .where(WorkflowHistory.content_item_id == content_id)
            .order_by(WorkflowHistory.created_at.asc(), WorkflowHistory.id.asc())
        )
        return [_history_to_entity(h) for h in result.scalars().all()]

    async def count_by_state(self, definition_id: str) -> dict[str, int]:
        result = await self.db.execute(
            select(ContentWorkflowItem.workflow_state, func.count(ContentWorkflowItem.id))
            .where(ContentWorkflowItem.workflow_definition_id == definition_id)
            .group_by(ContentWorkflowItem.workflow_state)
        )
        return {state: count for state, count in result.all()}

    async def list_history_for_definition(
        self,
        definition_id: str,
        from_date: datetime,
        to_date: datetime,
    ) -> list[WorkflowHistoryEntry]:
        result = await self.db.execute(
            select(WorkflowHistory)
            .where(
                WorkflowHistory.workflow_definition_id == definition_id,
                WorkflowHistory.created_at >= from_date,
                WorkflowHistory.created_at <= to_date,
            )
            .order_by(WorkflowHistory.created_at.asc(), WorkflowHistory.id.asc())
        )
        return [_history_to_entity(h) for h in result.scalars().all()]
