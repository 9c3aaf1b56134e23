"""Workflow definition ORM models: definition, states, transitions, roles, grants.

All children are owned by their definition (cascade delete at ORM and FK level).
"""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampedModel


class WorkflowDefinition(TimestampedModel, Base):
    """Workflow definition. Table: workflow_definition. content_types is a JSON list of tags."""

    __tablename__ = "workflow_definition"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)
    content_types: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.false()
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.true(), index=True
    )
    initial_state_key: Mapped[str] = mapped_column(String(64), nullable=False)

    states: Mapped[list[WorkflowState]] = relationship(
        back_populates="definition",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkflowState.sort_order",
        lazy="selectin",
    )
    transitions: Mapped[list[WorkflowTransition]] = relationship(
        back_populates="definition",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkflowTransition.sort_order",
        lazy="selectin",
    )
    roles: Mapped[list[WorkflowRole]] = relationship(
        back_populates="definition",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkflowRole.sort_order",
        lazy="selectin",
    )


class WorkflowState(CuidMixin, Base):
    """Workflow state. Table: workflow_state. Key unique per definition."""

    __tablename__ = "workflow_state"

    workflow_definition_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_definition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_initial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_final: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    definition: Mapped[WorkflowDefinition] = relationship(back_populates="states")

    __table_args__ = (
        UniqueConstraint(
            "workflow_definition_id", "key", name="uq_workflow_state_definition_key"
        ),
    )


class WorkflowTransition(CuidMixin, Base):
    """Workflow transition. Table: workflow_transition. required_role_key null = unrestricted."""

    __tablename__ = "workflow_transition"

    workflow_definition_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_definition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_state_key: Mapped[str] = mapped_column(String(64), nullable=False)
    to_state_key: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    required_role_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    css_class: Mapped[str | None] = mapped_column(String(64), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    requires_comment: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    send_notification: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    notification_template: Mapped[str | None] = mapped_column(Text, nullable=True)

    definition: Mapped[WorkflowDefinition] = relationship(back_populates="transitions")
    role_permissions: Mapped[list[WorkflowRolePermission]] = relationship(
        back_populates="transition",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index(
            "ix_workflow_transition_definition_from",
            "workflow_definition_id",
            "from_state_key",
        ),
    )


class WorkflowRole(CuidMixin, Base):
    """Workflow-scoped role. Table: workflow_role. role_key names an external identity role."""

    __tablename__ = "workflow_role"

    workflow_definition_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_definition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_key: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    can_create: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_edit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_delete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_view_all: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    allowed_from_states: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    allowed_to_states: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    definition: Mapped[WorkflowDefinition] = relationship(back_populates="roles")

    __table_args__ = (
        UniqueConstraint(
            "workflow_definition_id", "role_key", name="uq_workflow_role_definition_key"
        ),
        CheckConstraint(
            "priority BETWEEN 1 AND 100", name="workflow_role_priority_check"
        ),
    )


class WorkflowRolePermission(CuidMixin, Base):
    """Grant of a transition to a workflow role. Table: workflow_role_permission."""

    __tablename__ = "workflow_role_permission"

    role_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_role.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    transition_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_transition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    can_execute: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    requires_approval: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    conditions: Mapped[str | None] = mapped_column(Text, nullable=True)
    from_required_role: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.false()
    )

    transition: Mapped[WorkflowTransition] = relationship(
        back_populates="role_permissions"
    )
    # Many-to-one only: orders grant deletes before role deletes in a flush.
    role: Mapped[WorkflowRole] = relationship(lazy="raise")

    __table_args__ = (
        UniqueConstraint(
            "role_id", "transition_id", name="uq_workflow_role_permission_pair"
        ),
    )


__all__ = [
    "WorkflowDefinition",
    "WorkflowRole",
    "WorkflowRolePermission",
    "WorkflowState",
    "WorkflowTransition",
]
