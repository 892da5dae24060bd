"""Column store backends.

- `MemoryColumnStore`: nested dicts in RAM; the test double.
- `SqlAlchemyColumnStore`: one relational table addressed by
  ``(keyspace, column_family, row_key, column_name)``.
"""

from .memory import MemoryColumnStore
from .sqlalchemy_store import SqlAlchemyColumnStore

__all__ = [
    "MemoryColumnStore",
    "SqlAlchemyColumnStore",
]
