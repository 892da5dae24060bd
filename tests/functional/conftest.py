"""Default marks for tests under `tests/functional/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import add_default_mark

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `functional` marks to items in `tests/functional/`."""
    add_default_mark(items, Path(__file__).parent.resolve(), "functional")
