"""Sequential file streams.

- `OutputStream`: buffers one partial block, stores full blocks as they fill,
  and records the length in the catalog on flush/close.
- `InputStream`: reads across block boundaries on demand from a length
  snapshotted when the stream was opened.

Streams borrow the catalog and the block store from the directory that
opened them; they never hold a reference to the directory itself.
"""

from .input import InputStream
from .output import OutputStream

__all__ = ["InputStream", "OutputStream"]
