"""Interfaces (application boundary) for BLOCKDIR.

Defines framework-free contracts: the column store port the engine persists
through, the block store and metadata catalog ports the streams and the
directory depend on, and the small DTOs they exchange.

Dependency rule: may import `blockdir.domain` only. It may be imported by
`blockdir.streams`, `blockdir.adapters`, and `blockdir.bootstrap`.
"""
