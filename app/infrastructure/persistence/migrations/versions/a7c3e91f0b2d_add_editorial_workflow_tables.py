"""add_editorial_workflow_tables

Revision ID: a7c3e91f0b2d
Revises:
Create Date: 2026-10-19 09:12:44.301522

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a7c3e91f0b2d"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Workflow definitions and owned children
    op.create_table(
        "workflow_definition",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.String(length=512), nullable=True),
        sa.Column("content_types", sa.JSON(), nullable=False),
        sa.Column("is_default", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("initial_state_key", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workflow_definition_is_active", "workflow_definition", ["is_active"]
    )

    op.create_table(
        "workflow_state",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_definition_id", sa.String(), nullable=False),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(length=16), nullable=True),
        sa.Column("icon", sa.String(length=64), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("is_initial", sa.Boolean(), nullable=False),
        sa.Column("is_final", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["workflow_definition_id"], ["workflow_definition.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "workflow_definition_id", "key", name="uq_workflow_state_definition_key"
        ),
    )
    op.create_index(
        "ix_workflow_state_workflow_definition_id",
        "workflow_state",
        ["workflow_definition_id"],
    )

    op.create_table(
        "workflow_transition",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_definition_id", sa.String(), nullable=False),
        sa.Column("from_state_key", sa.String(length=64), nullable=False),
        sa.Column("to_state_key", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("required_role_key", sa.String(length=128), nullable=True),
        sa.Column("css_class", sa.String(length=64), nullable=True),
        sa.Column("icon", sa.String(length=64), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("requires_comment", sa.Boolean(), nullable=False),
        sa.Column("send_notification", sa.Boolean(), nullable=False),
        sa.Column("notification_template", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["workflow_definition_id"], ["workflow_definition.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workflow_transition_workflow_definition_id",
        "workflow_transition",
        ["workflow_definition_id"],
    )
    op.create_index(
        "ix_workflow_transition_definition_from",
        "workflow_transition",
        ["workflow_definition_id", "from_state_key"],
    )

    op.create_table(
        "workflow_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_definition_id", sa.String(), nullable=False),
        sa.Column("role_key", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("can_create", sa.Boolean(), nullable=False),
        sa.Column("can_edit", sa.Boolean(), nullable=False),
        sa.Column("can_delete", sa.Boolean(), nullable=False),
        sa.Column("can_view_all", sa.Boolean(), nullable=False),
        sa.Column("allowed_from_states", sa.Text(), server_default="", nullable=False),
        sa.Column("allowed_to_states", sa.Text(), server_default="", nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["workflow_definition_id"], ["workflow_definition.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "workflow_definition_id", "role_key", name="uq_workflow_role_definition_key"
        ),
        sa.CheckConstraint(
            "priority BETWEEN 1 AND 100", name="workflow_role_priority_check"
        ),
    )
    op.create_index(
        "ix_workflow_role_workflow_definition_id",
        "workflow_role",
        ["workflow_definition_id"],
    )

    op.create_table(
        "workflow_role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("transition_id", sa.String(), nullable=False),
        sa.Column("can_execute", sa.Boolean(), nullable=False),
        sa.Column("requires_approval", sa.Boolean(), nullable=False),
        sa.Column("conditions", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["role_id"], ["workflow_role.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["transition_id"], ["workflow_transition.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "role_id", "transition_id", name="uq_workflow_role_permission_pair"
        ),
    )
    op.create_index(
        "ix_workflow_role_permission_role_id", "workflow_role_permission", ["role_id"]
    )
    op.create_index(
        "ix_workflow_role_permission_transition_id",
        "workflow_role_permission",
        ["transition_id"],
    )

    # Content under workflow control and its history
    op.create_table(
        "content_workflow_item",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("content_type", sa.String(length=128), nullable=False),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("owner_id", sa.String(length=128), nullable=True),
        sa.Column("workflow_definition_id", sa.String(), nullable=True),
        sa.Column("workflow_state", sa.String(length=64), nullable=False),
        sa.Column("last_reviewer_id", sa.String(length=128), nullable=True),
        sa.Column("last_reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_comment", sa.Text(), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["workflow_definition_id"], ["workflow_definition.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_content_workflow_item_content_type", "content_workflow_item", ["content_type"]
    )
    op.create_index(
        "ix_content_workflow_item_owner_id", "content_workflow_item", ["owner_id"]
    )
    op.create_index(
        "ix_content_workflow_item_workflow_definition_id",
        "content_workflow_item",
        ["workflow_definition_id"],
    )
    op.create_index(
        "ix_content_workflow_item_definition_state",
        "content_workflow_item",
        ["workflow_definition_id", "workflow_state"],
    )

    op.create_table(
        "workflow_history",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("content_item_id", sa.String(), nullable=False),
        sa.Column("workflow_definition_id", sa.String(), nullable=True),
        sa.Column("transition_id", sa.String(), nullable=True),
        sa.Column("transition_name", sa.String(length=128), nullable=False),
        sa.Column("from_state_key", sa.String(length=64), nullable=False),
        sa.Column("to_state_key", sa.String(length=64), nullable=False),
        sa.Column("actor_id", sa.String(length=128), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["content_item_id"], ["content_workflow_item.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workflow_history_workflow_definition_id",
        "workflow_history",
        ["workflow_definition_id"],
    )
    op.create_index(
        "ix_workflow_history_content_created",
        "workflow_history",
        ["content_item_id", "created_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_workflow_history_content_created", table_name="workflow_history")
    op.drop_index(
        "ix_workflow_history_workflow_definition_id", table_name="workflow_history"
    )
    op.drop_table("workflow_history")
    op.drop_index(
        "ix_content_workflow_item_definition_state", table_name="content_workflow_item"
    )
    op.drop_index(
        "ix_content_workflow_item_workflow_definition_id",
        table_name="content_workflow_item",
    )
    op.drop_index("ix_content_workflow_item_owner_id", table_name="content_workflow_item")
    op.drop_index(
        "ix_content_workflow_item_content_type", table_name="content_workflow_item"
    )
    op.drop_table("content_workflow_item")
    op.drop_index(
        "ix_workflow_role_permission_transition_id",
        table_name="workflow_role_permission",
    )
    op.drop_index(
        "ix_workflow_role_permission_role_id", table_name="workflow_role_permission"
    )
    op.drop_table("workflow_role_permission")
    op.drop_index("ix_workflow_role_workflow_definition_id", table_name="workflow_role")
    op.drop_table("workflow_role")
    op.drop_index(
        "ix_workflow_transition_definition_from", table_name="workflow_transition"
    )
    op.drop_index(
        "ix_workflow_transition_workflow_definition_id", table_name="workflow_transition"
    )
    op.drop_table("workflow_transition")
    op.drop_index("ix_workflow_state_workflow_definition_id", table_name="workflow_state")
    op.drop_table("workflow_state")
    op.drop_index("ix_workflow_definition_is_active", table_name="workflow_definition")
    op.drop_table("workflow_definition")
