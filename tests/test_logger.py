"""
Tests for logging setup and formatters

Run with: pytest tests/test_logger.py -v
"""

import json
import logging

import pytest

from parking_validator.utils.logger import (
    LOGGER_NAME,
    ConsoleFormatter,
    JsonLinesFormatter,
    configure_logging,
    get_logger,
    log_file_path,
    shutdown_logging,
)


def record(level=logging.INFO, msg="hello", data=None):
    rec = logging.LogRecord("parking_validator.test", level, __file__, 1, msg, None, None)
    if data is not None:
        rec.data = data
    return rec


@pytest.fixture
def configured(make_config):
    loggers = []

    def _configure(**overrides):
        logger = configure_logging(make_config(**overrides), console=False)
        loggers.append(logger)
        return logger

    yield _configure
    for logger in loggers:
        shutdown_logging(logger)


class TestFormatters:
    def test_json_line(self):
        line = JsonLinesFormatter().format(record(logging.WARNING, "careful", {"n": 1}))
        entry = json.loads(line)

        assert entry["level"] == "WARN"
        assert entry["message"] == "careful"
        assert entry["data"] == {"n": 1}
        assert entry["timestamp"].endswith("Z")

    def test_json_line_without_data(self):
        entry = json.loads(JsonLinesFormatter().format(record()))
        assert "data" not in entry

    def test_console_plain(self):
        text = ConsoleFormatter(color=False).format(record(logging.ERROR, "broken", {"x": 1}))
        assert text.endswith("ERROR: broken")

    def test_console_verbose_echoes_data(self):
        text = ConsoleFormatter(verbose=True, color=False).format(record(data={"x": 1}))
        assert '"x": 1' in text


class TestGetLogger:
    def test_children_share_package_logger(self):
        assert get_logger("services.backup").name == f"{LOGGER_NAME}.services.backup"
        assert get_logger(f"{LOGGER_NAME}.utils").name == f"{LOGGER_NAME}.utils"
        assert get_logger().name == LOGGER_NAME


class TestConfigureLogging:
    def test_writes_daily_file(self, configured, make_config):
        logger = configured()
        get_logger("tests").info("written", extra={"data": {"k": "v"}})
        shutdown_logging(logger)

        path = log_file_path(make_config().log_dir)
        entries = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert entries[-1]["message"] == "written"
        assert entries[-1]["data"] == {"k": "v"}

    def test_level_from_config(self, configured):
        logger = configured(log_level="warn")
        assert logger.level == logging.WARNING
        assert not logger.isEnabledFor(logging.INFO)

    def test_reconfigure_replaces_handlers(self, configured):
        configured()
        logger = configured()
        assert len(logger.handlers) == 1

    def test_shutdown_detaches_everything(self, configured):
        logger = configured()
        shutdown_logging(logger)

        assert logger.handlers == []
        assert logger.level == logging.NOTSET
