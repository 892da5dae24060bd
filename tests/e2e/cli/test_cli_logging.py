"""End-to-end tests of the ``blockdir`` logging options.

Drives the test-only ``log-demo`` command under different verbosity flags,
``-L`` overrides, ``--debug`` and flight recorder settings.
"""

import re
from pathlib import Path

import pytest

from blockdir.entrypoints.cli.main import blockdir

# pylint: disable=unused-argument

LOG_PATH = "flight_recorder.log"


def found(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.MULTILINE) is not None


def read_log() -> str:
    return Path(LOG_PATH).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "flags, shown, hidden",
    [
        ([], "warning-level", "info-level"),
        (["-v"], "info-level", "debug-level"),
        (["-vv"], "debug-level", None),
        (["-q"], "error-level", "warning-level"),
        (["-qq"], "critical-level", "error-level"),
    ],
    ids=["default", "-v", "-vv", "-q", "-qq"],
)
def test_console_verbosity(registered_log_demo, runner, fs, flags, shown, hidden):
    result = runner.invoke(blockdir, ["--log-path", LOG_PATH, *flags, "log-demo"])
    assert result.exit_code == 0
    assert found(shown, result.output)
    if hidden:
        assert not found(hidden, result.output)


def test_third_party_records_are_prefixed(registered_log_demo, runner, fs):
    result = runner.invoke(
        blockdir, ["--log-path", LOG_PATH, "-v", "-L", "some=INFO", "log-demo"]
    )
    assert result.exit_code == 0
    assert found(r"\[some\] This is an info-level third-party", result.output)


@pytest.mark.parametrize(
    "env, cli_args",
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"BLOCKDIR_LOGGER_LEVEL": "some.thirdparty=INFO"}, ["-vv"]),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_level_override(registered_log_demo, runner, fs, env, cli_args):
    result = runner.invoke(
        blockdir, ["--log-path", LOG_PATH, *cli_args, "log-demo"], env=env
    )
    assert result.exit_code == 0
    assert not found("debug-level third-party", result.output)
    assert found("info-level third-party", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    result = runner.invoke(blockdir, ["--log-path", LOG_PATH, "--debug", "log-demo"])
    assert result.exit_code == 0
    assert found(r"conftest\.py:\d+", result.output)


def test_paths_hidden_by_default(registered_log_demo, runner, fs):
    result = runner.invoke(blockdir, ["--log-path", LOG_PATH, "log-demo"])
    assert not found(r"conftest\.py:\d+", result.output)


def test_flight_recorder_dumps_on_warning(registered_log_demo, runner, fs):
    result = runner.invoke(
        blockdir,
        ["--log-path", LOG_PATH, "-L", "some.thirdparty=INFO", "log-demo"],
    )
    assert result.exit_code == 0
    content = read_log()
    # buffered DEBUG records are written once a WARNING arrives
    assert "This is a debug-level test message." in content
    assert "This is a warning-level test message." in content
    assert "This is a critical-level test message." in content
    assert "This is an info-level third-party test message." in content
    assert "This is a debug-level third-party test message." not in content
    # records after the last dump stay in memory
    assert "This is a final debug-level test message." not in content


def test_flight_recorder_force_flush(registered_log_demo, runner, fs):
    result = runner.invoke(
        blockdir, ["--log-path", LOG_PATH, "--force-flush", "log-demo"]
    )
    assert result.exit_code == 0
    assert "This is a final debug-level test message." in read_log()


def test_flight_recorder_can_be_disabled(registered_log_demo, runner, fs):
    result = runner.invoke(
        blockdir, ["--log-path", LOG_PATH, "--no-flight-recorder", "log-demo"]
    )
    assert result.exit_code == 0
    assert not Path(LOG_PATH).exists()


def test_flight_recorder_truncates_between_runs(registered_log_demo, runner, fs):
    runner.invoke(blockdir, ["--log-path", LOG_PATH, "log-demo"])
    first = read_log().count("\n")
    runner.invoke(blockdir, ["--log-path", LOG_PATH, "log-demo"])
    assert read_log().count("\n") == first


def test_startup_summary_in_flight_recorder(registered_log_demo, runner, fs):
    result = runner.invoke(blockdir, ["--log-path", LOG_PATH, "log-demo"])
    assert result.exit_code == 0
    content = read_log()
    assert found(r"BLOCKDIR \d+\.\d+\.\d+ \(console=WARNING, flight-recorder=ON\)", content)
    assert "SQLAlchemy:" in content


def test_version(runner):
    result = runner.invoke(blockdir, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
