"""Default marks for tests under `tests/unit/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import add_default_mark

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `unit` marks to items in `tests/unit/`."""
    add_default_mark(items, Path(__file__).parent.resolve(), "unit")
