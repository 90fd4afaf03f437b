"""
Tests for logging configuration.
"""

import json
import logging

import pytest
import typer

from vappnet.core.logging_utils import (
    configure_logging,
    log_file_callback,
    log_level_callback,
    log_structured,
    logger,
)


@pytest.fixture
def restore_logging():
    yield
    for handler in logger.handlers[:]:
        handler.close()
    configure_logging(level="info")


def test_json_log_file(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "vappnet.log"
    configure_logging(level="debug", log_file=str(log_file), quiet=True, json_format=True)

    log_structured("Network configuration update accepted", "info", vapp_id="1234", task_id="abc")

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    record = records[-1]
    assert record["level"] == "INFO"
    assert record["message"] == "Network configuration update accepted - vapp_id=1234 task_id=abc"
    assert record["vapp_id"] == "1234"
    assert record["task_id"] == "abc"


def test_quiet_has_no_console_handler(restore_logging):
    configure_logging(level="info", quiet=True)

    assert logger.handlers == []
    assert logger.level == logging.WARNING


def test_verbose_forces_debug(restore_logging):
    configure_logging(level="error", verbose=True)

    assert logger.level == logging.DEBUG


def test_log_level_callback(restore_logging):
    assert log_level_callback("WARNING") == "warning"
    with pytest.raises(typer.BadParameter):
        log_level_callback("loud")


def test_log_file_callback(tmp_path):
    log_file = tmp_path / "logs" / "vappnet.log"
    assert log_file_callback(str(log_file)) == str(log_file)
    assert log_file.exists()

    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(typer.BadParameter):
        log_file_callback(str(blocker / "vappnet.log"))
