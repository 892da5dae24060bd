"""Database plumbing shared by the SQLAlchemy adapters: engines, dialect
helpers, table metadata and Alembic migrations."""
