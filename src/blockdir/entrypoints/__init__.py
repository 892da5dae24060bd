"""Entrypoints (inbound adapters) for BLOCKDIR.

Expose directories to the outside world. Currently only the ``blockdir``
command line lives here.

Dependency rule: may import `blockdir.bootstrap`, `blockdir.config` and
`blockdir.domain`; avoid importing `blockdir.adapters` directly except for
database administration.
"""
