"""Alembic migration environment for the BLOCKDIR schema."""
