"""Bootstrap (composition root) for BLOCKDIR.

Assembles a `BlockDirectory` at runtime: builds the engine and column store
from configuration, layers the block store, optional cache, and catalog on
top, and hands back the facade.

Import rules:
- Entry points import *this* package rather than individual adapters.
- This package may import `blockdir.adapters`, `blockdir.interfaces`,
  `blockdir.domain`, and `blockdir.config`.
- Inner layers must not import `blockdir.bootstrap`.
"""

from .bootstrap import build_directory, open_directory, open_memory_directory

__all__ = ["build_directory", "open_directory", "open_memory_directory"]
