"""BLOCKDIR

A virtual directory of named files whose bytes are stored as fixed-size
blocks inside a column store. Files are written and read through sequential
streams that cross block boundaries transparently, so an index writer can
treat the store as an ordinary random-access filesystem.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
