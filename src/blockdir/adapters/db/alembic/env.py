"""Alembic environment for the BLOCKDIR column store schema.

The database URL is taken from, in order: ``alembic -x url=...``, the
``sqlalchemy.url`` option set by `blockdir.config.build_alembic_config`, and
finally the ``BLOCKDIR_DB_URL`` environment variable.

Type and server-default drift are compared on autogenerate; SQLite runs in
batch mode so ALTER TABLE can be emulated.
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

import blockdir.adapters.column_store.schema  # noqa: F401 # pylint: disable=unused-import
from blockdir.adapters.db.metadata import metadata

# pylint: disable=no-member

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def resolve_url() -> str:
    """Return the first configured database URL."""
    candidates = (
        context.get_x_argument(as_dictionary=True).get("url"),
        config.get_main_option("sqlalchemy.url"),
        os.environ.get("BLOCKDIR_DB_URL"),
    )
    for url in candidates:
        # an unexpanded ini placeholder counts as unset
        if url and "%(" not in url:
            return url
    raise RuntimeError("Set BLOCKDIR_DB_URL to your database URL.")


def run_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=resolve_url(),
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """Apply the migrations over a fresh, unpooled connection."""
    engine = engine_from_config(
        {"sqlalchemy.url": resolve_url()}, prefix="sqlalchemy.", poolclass=pool.NullPool
    )
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=metadata,
            render_as_batch=connection.dialect.name == "sqlite",
            **COMPARE_OPTIONS,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
