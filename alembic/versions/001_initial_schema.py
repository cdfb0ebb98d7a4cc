"""Initial schema — participants and group counters.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Participants (create-only registry)
    op.create_table(
        "participants",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("status", sa.String(10), nullable=False, server_default="pending"),
        sa.Column("direction", sa.String(10), nullable=False),
        sa.Column("group_name", sa.String(50), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "idx_participants_group_status", "participants", ["group_name", "status"]
    )

    # Group counters
    op.create_table(
        "group_counts",
        sa.Column("group_name", sa.String(50), primary_key=True),
        sa.Column("count", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("count >= 0", name="ck_group_counts_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("group_counts")
    op.drop_index("idx_participants_group_status", table_name="participants")
    op.drop_table("participants")
