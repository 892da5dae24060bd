"""The ``blockdir`` command line."""
