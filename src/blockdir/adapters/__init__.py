"""Adapters (infrastructure) for BLOCKDIR.

Provide concrete implementations of the ports in `blockdir.interfaces`: the
in-memory and SQLAlchemy column stores, the block store and catalog that map
files onto column families, the block cache, plus database engines, metadata
and migrations.

Dependency rule: may import `blockdir.domain` and `blockdir.interfaces`; the
domain must not import this package.
"""
