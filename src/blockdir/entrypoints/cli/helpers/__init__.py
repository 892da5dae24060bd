"""CLI helpers for BLOCKDIR.

Utilities used by the command-line interface: URL sanitization for safe
display, ``NAME=LEVEL`` log option parsing, and message emitters that write
to stderr with emoji→ASCII fallbacks.
"""

from .db_url import sanitize_url
from .log_level_parser import parse_log_level
from .messages import error, success, warn

__all__ = ["error", "parse_log_level", "sanitize_url", "success", "warn"]
