"""Content workflow item and workflow history ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampedModel


class ContentWorkflowItem(TimestampedModel, Base):
    """Content under workflow control. Table: content_workflow_item.

    workflow_state is the single active state; it is only changed by a
    compare-and-swap UPDATE in ContentItemRepository.
    """

    __tablename__ = "content_workflow_item"

    content_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    owner_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    workflow_definition_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("workflow_definition.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    workflow_state: Mapped[str] = mapped_column(String(64), nullable=False)
    last_reviewer_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    review_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index(
            "ix_content_workflow_item_definition_state",
            "workflow_definition_id",
            "workflow_state",
        ),
    )


class WorkflowHistory(CuidMixin, Base):
    """Executed transition log. Table: workflow_history. Append-only."""

    __tablename__ = "workflow_history"

    content_item_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("content_workflow_item.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Plain strings (no FK): history outlives definition edits and deletes.
    workflow_definition_id: Mapped[str | None] = mapped_column(
        String, nullable=True, index=True
    )
    transition_id: Mapped[str | None] = mapped_column(String, nullable=True)
    transition_name: Mapped[str] = mapped_column(String(128), nullable=False)
    from_state_key: Mapped[str] = mapped_column(String(64), nullable=False)
    to_state_key: Mapped[str] = mapped_column(String(64), nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index(
            "ix_workflow_history_content_created",
            "content_item_id",
            "created_at",
        ),
    )
