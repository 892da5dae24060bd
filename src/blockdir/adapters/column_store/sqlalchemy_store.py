"""SQLAlchemy-backed ColumnStore adapter.

Stores every column of the wide-column model as one row of the
``column_store`` table (see `.schema`). Each public call runs in its own
transaction (`Engine.begin()`), which gives the per-key atomicity and
read-after-write consistency the port requires.

Upserts are dialect-specific (``INSERT ... ON CONFLICT DO UPDATE``) and are
supported on SQLite and PostgreSQL.

Exceptions:
    Any `DBAPIError` (connection loss, timeouts, missing tables, ...) is mapped
    to `StoreUnavailableError` and re-raised. Nothing is retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError

from blockdir.adapters.db.dialects import DialectName
from blockdir.interfaces.column_store import ColumnStore, StoreUnavailableError

from .schema import column_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine
    from sqlalchemy.sql.dml import Insert

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAlchemyColumnStore(ColumnStore):
    """ColumnStore implementation that supports both Postgres and SQLite.

    Args:
        engine: Engine whose database already holds the ``column_store``
            table (created by the Alembic migrations or `metadata.create_all`).
        keyspace: Keyspace this store is bound to.
        dispose_engine: If True, `close()` disposes the engine's pool.
    """

    def __init__(self, engine: Engine, keyspace: str, *, dispose_engine: bool = False):
        self.engine = engine
        self.dialect = DialectName.from_sqlalchemy(engine)
        self._keyspace = keyspace
        self._dispose_engine = dispose_engine
        self._closed = False

    @property
    def keyspace(self) -> str:
        return self._keyspace

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def get(self, family: str, row: str, column: str) -> bytes | None:
        stmt = select(column_store.c.value).where(
            *self._row_filter(family, row),
            column_store.c.column_name == column,
        )
        value = self._run(lambda conn: conn.execute(stmt).scalar_one_or_none())
        return None if value is None else bytes(value)

    def get_row(self, family: str, row: str) -> dict[str, bytes]:
        stmt = select(column_store.c.column_name, column_store.c.value).where(
            *self._row_filter(family, row)
        )
        rows = self._run(lambda conn: conn.execute(stmt).all())
        return {r.column_name: bytes(r.value) for r in rows}

    def insert(self, family: str, row: str, columns: Mapping[str, bytes]) -> None:
        if not columns:
            return
        values = [
            {
                "keyspace": self._keyspace,
                "column_family": family,
                "row_key": row,
                "column_name": name,
                "value": bytes(value),
            }
            for name, value in columns.items()
        ]
        stmt = self._build_upsert(values)
        self._run(lambda conn: conn.execute(stmt))

    def remove(
        self, family: str, row: str, columns: Iterable[str] | None = None
    ) -> None:
        stmt = delete(column_store).where(*self._row_filter(family, row))
        if columns is not None:
            names = list(columns)
            if not names:
                return
            stmt = stmt.where(column_store.c.column_name.in_(names))
        self._run(lambda conn: conn.execute(stmt))

    def row_keys(self, family: str) -> list[str]:
        stmt = (
            select(column_store.c.row_key)
            .where(
                column_store.c.keyspace == self._keyspace,
                column_store.c.column_family == family,
            )
            .distinct()
            .order_by(column_store.c.row_key.asc())
        )
        return list(self._run(lambda conn: conn.execute(stmt).scalars().all()))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._dispose_engine:
            self.engine.dispose()

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _row_filter(self, family: str, row: str) -> tuple:
        return (
            column_store.c.keyspace == self._keyspace,
            column_store.c.column_family == family,
            column_store.c.row_key == row,
        )

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except DBAPIError as e:  # OperationalError, InterfaceError, etc.
            logger.warning("Column store unavailable: %s", e.__class__.__name__)
            raise StoreUnavailableError(str(e)) from e

    def _run(self, work: Callable[[Connection], T]) -> T:
        with self._transaction() as conn:
            return work(conn)

    def _build_upsert(self, values: list[dict]) -> Insert:
        """Build an ``INSERT ... ON CONFLICT (pk) DO UPDATE SET value`` statement."""
        insert = pg_insert if self.dialect is DialectName.POSTGRES else sqlite_insert
        stmt = insert(column_store).values(values)
        return stmt.on_conflict_do_update(
            index_elements=[c.name for c in column_store.primary_key.columns],
            set_={"value": stmt.excluded.value},
        )
