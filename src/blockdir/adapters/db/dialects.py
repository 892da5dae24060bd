"""Supported database dialects.

The SQL column store needs a dialect-specific upsert, so the backends it
knows about are listed here as an Enum rather than as string literals
scattered through the adapters.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class UnsupportedDialect(Exception):
    """Raised when an unsupported database dialect is encountered."""


class DialectName(str, Enum):
    """SQLAlchemy dialect names BLOCKDIR can store blocks in.

    Attributes:
        POSTGRES: PostgreSQL dialect (``"postgresql"``).
        SQLITE:   SQLite dialect (``"sqlite"``).
    """

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Normalize a raw dialect string, ignoring any ``+driver`` suffix.

        Accepts aliases such as ``"postgres"``, ``"pg"`` and
        ``"sqlite+pysqlite"``.

        Raises:
            UnsupportedDialect: if the dialect is not recognized.
        """
        base = (dialect_str or "").strip().lower().split("+", 1)[0]

        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base == "sqlite":
            return cls.SQLITE

        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """Extract the dialect of a SQLAlchemy Engine or Connection.

        Raises:
            UnsupportedDialect: if the object has no dialect or it is unknown.
        """
        try:
            name = obj.dialect.name
        except AttributeError as e:
            raise UnsupportedDialect(
                f"Object {type(obj).__name__} does not expose .dialect.name"
            ) from e
        return cls.from_string(name)
