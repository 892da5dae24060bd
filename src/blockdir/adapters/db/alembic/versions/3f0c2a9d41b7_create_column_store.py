"""create column_store table

Revision ID: 3f0c2a9d41b7
Revises:
Create Date: 2026-10-18 09:12:44.512031

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f0c2a9d41b7"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "column_store",
        sa.Column(
            "keyspace",
            sa.String(length=100),
            nullable=False,
            comment="Keyspace the column belongs to.",
        ),
        sa.Column(
            "column_family",
            sa.String(length=200),
            nullable=False,
            comment="Column family (namespace of rows) inside the keyspace.",
        ),
        sa.Column(
            "row_key",
            sa.String(length=512),
            nullable=False,
            comment="Row key; BLOCKDIR uses file names.",
        ),
        sa.Column(
            "column_name",
            sa.String(length=200),
            nullable=False,
            comment="Column name inside the row (e.g. BLOCK-0, length).",
        ),
        sa.Column(
            "value",
            sa.LargeBinary(),
            nullable=False,
            comment="Opaque column value.",
        ),
        sa.CheckConstraint(
            "length(column_name) > 0",
            name=op.f("ck_column_store_non_empty_column_name"),
        ),
        sa.PrimaryKeyConstraint(
            "keyspace",
            "column_family",
            "row_key",
            "column_name",
            name=op.f("pk_column_store"),
        ),
        comment="Wide-column store: one row per (keyspace, family, row, column).",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("column_store")
