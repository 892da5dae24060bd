"""Fixtures for end-to-end CLI logging tests.

Registers a test-only ``log-demo`` command on the top-level ``blockdir``
group. It logs at every level on a ``blockdir.demo`` logger and on a
third-party logger, so tests can check console verbosity, per-logger
overrides and the flight recorder without touching a database.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from blockdir.entrypoints.cli.main import blockdir

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit one message per level on a project and a third-party logger."""
    logger = logging.getLogger("blockdir.demo")
    third_party = logging.getLogger("some.thirdparty")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    third_party.debug("This is a debug-level third-party test message.")
    third_party.info("This is an info-level third-party test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    logger.debug("This is a final debug-level test message.")


def _unregister(group: click.Group, name: str) -> None:
    """Remove `name` from `group` and any section registry click-extra keeps."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for section in getattr(group, "_sections", []):
        getattr(section, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Make ``blockdir log-demo`` available for one test."""
    blockdir.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _unregister(blockdir, "log-demo")


@pytest.fixture
def runner():
    """A Click CliRunner."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield
