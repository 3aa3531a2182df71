from __future__ import annotations

import io
import logging

import pytest

from expense_core.logging_setup import _parse_level, configure_logging, get_logger


@pytest.mark.parametrize(
    "raw, expected",
    [
        (logging.DEBUG, logging.DEBUG),
        ("info", logging.INFO),
        (" Error ", logging.ERROR),
        ("15", 15),
        ("loud", logging.WARNING),
        ("", logging.WARNING),
        (None, logging.WARNING),
    ],
)
def test_parse_level(raw, expected):
    assert _parse_level(raw) == expected


def test_configure_logging_writes_to_given_stream():
    stream = io.StringIO()

    configure_logging("DEBUG", fmt="%(levelname)s %(message)s", stream=stream)
    get_logger("expense_core.services").debug("saved %d", 3)

    assert stream.getvalue() == "DEBUG saved 3\n"


def test_configure_logging_reads_level_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EXPENSE_TRACKER_LOG_LEVEL", "info")
    stream = io.StringIO()

    configure_logging(stream=stream)
    logger = get_logger("expense_core.storage")
    logger.debug("hidden")
    logger.info("shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert output.rstrip().endswith("expense_core.storage INFO shown")


def test_configure_logging_runs_once():
    first, second = io.StringIO(), io.StringIO()

    configure_logging("WARNING", fmt="%(message)s", stream=first)
    configure_logging("DEBUG", fmt="%(message)s", stream=second)
    get_logger("expense_core.csv_codec").warning("once")

    assert first.getvalue() == "once\n"
    assert second.getvalue() == ""


def test_configure_logging_defaults_to_current_stderr(
    capsys: pytest.CaptureFixture[str],
):
    configure_logging("WARNING", fmt="%(message)s")
    get_logger("expense_core.storage").warning("to stderr")

    assert capsys.readouterr().err == "to stderr\n"
