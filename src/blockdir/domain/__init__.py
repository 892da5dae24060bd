"""Domain layer for BLOCKDIR.

Contains the storage rules that do not depend on any backend: the wire codec,
the block cursor arithmetic, the file entry value object, and the error
taxonomy.

Dependency rule: do not import from `blockdir.adapters` or `blockdir.entrypoints`.
"""
