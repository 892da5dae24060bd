"""Column store schema.

Defines the ``column_store`` table that renders the wide-column model in a
relational database. Each row of the table is one *column* of the model:

| keyspace | column_family | row_key | column_name | value |
|----------|---------------|---------|-------------|-------|

Constraints (enforced here):

| Constraint                                                  | Purpose                 |
|-------------------------------------------------------------|-------------------------|
| PK(keyspace, column_family, row_key, column_name)           | one value per address   |
| CHECK(length(column_name) > 0)                              | no anonymous columns    |

The primary key also serves row slices (``get_row``) and row listings
(``row_keys``), which filter on a prefix of it.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, LargeBinary, String, Table

from blockdir.adapters.db.metadata import metadata

__all__ = ["column_store"]

column_store = Table(
    "column_store",
    metadata,
    Column(
        "keyspace",
        String(100),
        primary_key=True,
        comment="Keyspace the column belongs to.",
    ),
    Column(
        "column_family",
        String(200),
        primary_key=True,
        comment="Column family (namespace of rows) inside the keyspace.",
    ),
    Column(
        "row_key",
        String(512),
        primary_key=True,
        comment="Row key; BLOCKDIR uses file names.",
    ),
    Column(
        "column_name",
        String(200),
        primary_key=True,
        comment="Column name inside the row (e.g. BLOCK-0, length).",
    ),
    Column(
        "value",
        LargeBinary,
        nullable=False,
        comment="Opaque column value.",
    ),
    CheckConstraint("length(column_name) > 0", name="non_empty_column_name"),
    comment="Wide-column store: one row per (keyspace, family, row, column).",
)
