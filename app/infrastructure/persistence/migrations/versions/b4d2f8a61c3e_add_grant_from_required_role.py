"""add_grant_from_required_role

Revision ID: b4d2f8a61c3e
Revises: a7c3e91f0b2d
Create Date: 2026-10-19 15:40:02.118904

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b4d2f8a61c3e"
down_revision: Union[str, Sequence[str], None] = "a7c3e91f0b2d"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column(
        "workflow_role_permission",
        sa.Column(
            "from_required_role",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column("workflow_role_permission", "from_required_role")
