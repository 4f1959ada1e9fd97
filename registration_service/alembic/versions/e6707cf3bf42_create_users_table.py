"""Create ``users`` table with a unique e-mail index.

Revision ID: e6707cf3bf42
Revises:
Create Date: 2025-11-14 21:02:16.307920

The unique index on ``email`` is what keeps two concurrent signups with the
same address from both being stored.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "e6707cf3bf42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE_NAME = "users"
IDX_ID = op.f("ix_users_id")
IDX_EMAIL = op.f("ix_users_email")


def upgrade() -> None:
    """Create the ``users`` table and its indexes."""
    op.create_table(
        TABLE_NAME,
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(IDX_ID, TABLE_NAME, ["id"], unique=False)
    op.create_index(IDX_EMAIL, TABLE_NAME, ["email"], unique=True)


def downgrade() -> None:
    """Drop indexes, then the ``users`` table."""
    op.drop_index(IDX_EMAIL, table_name=TABLE_NAME)
    op.drop_index(IDX_ID, table_name=TABLE_NAME)
    op.drop_table(TABLE_NAME)
