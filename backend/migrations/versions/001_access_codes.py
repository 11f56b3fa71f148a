"""Create access_codes table.

Revision ID: 001_access_codes
Revises:
Create Date: 2026-10-19

One row per distributable six-digit code. Timestamps are epoch seconds.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_access_codes"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # NULL status is the unset state; CLAIMED is terminal
    op.create_table(
        "access_codes",
        sa.Column("code", sa.String(6), primary_key=True),
        sa.Column("status", sa.String(16), nullable=True),
        sa.Column("client_id", sa.String(255), nullable=True),
        sa.Column("claimed_at", sa.BigInteger(), nullable=True),
        sa.Column("expires_at", sa.BigInteger(), nullable=True),
        sa.Column("ttl", sa.BigInteger(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.BigInteger(), nullable=True),
        sa.CheckConstraint(
            "status IS NULL OR status IN ('AVAILABLE', 'ASSIGNED', 'CLAIMED')",
            name="ck_access_codes_status",
        ),
    )
    # Retention sweep scans by ttl
    op.create_index("ix_access_codes_ttl", "access_codes", ["ttl"])


def downgrade() -> None:
    op.drop_index("ix_access_codes_ttl", table_name="access_codes")
    op.drop_table("access_codes")
