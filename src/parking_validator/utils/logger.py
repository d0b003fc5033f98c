# src/parking_validator/utils/logger.py
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from parking_validator.utils.config import AppConfig
from parking_validator.utils.timestamps import date_stamp, iso_timestamp

LOGGER_NAME = "parking_validator"

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Level names as they appear in the log file
LEVEL_LABELS = {
    logging.CRITICAL: "ERROR",
    logging.ERROR: "ERROR",
    logging.WARNING: "WARN",
    logging.INFO: "INFO",
    logging.DEBUG: "DEBUG",
}

COLORS = {
    "ERROR": "\x1b[31m",
    "WARN": "\x1b[33m",
    "INFO": "\x1b[36m",
    "DEBUG": "\x1b[90m",
}
RESET = "\x1b[0m"


def _label(record: logging.LogRecord) -> str:
    return LEVEL_LABELS.get(record.levelno, record.levelname)


def _record_time(record: logging.LogRecord) -> str:
    return iso_timestamp(datetime.fromtimestamp(record.created, tz=timezone.utc))


class JsonLinesFormatter(logging.Formatter):
    """One JSON object per line: {timestamp, level, message, data?}"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": _record_time(record),
            "level": _label(record),
            "message": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = dict(data)
        if record.exc_info:
            entry.setdefault("data", {})
            entry["data"]["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """[timestamp] LEVEL: message, colored; echoes the data payload when verbose."""

    def __init__(self, verbose: bool = False, color: bool = True):
        super().__init__()
        self.verbose = verbose
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        label = _label(record)
        line = f"[{_record_time(record)}] {label}: {record.getMessage()}"
        if self.color:
            line = f"{COLORS.get(label, '')}{line}{RESET}"

        data = getattr(record, "data", None)
        if data and self.verbose:
            line += "\n" + json.dumps(data, indent=2, default=str, ensure_ascii=False)
        return line


def log_file_path(log_dir: Path, moment: Optional[datetime] = None) -> Path:
    return Path(log_dir) / f"validation-{date_stamp(moment)}.log"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return a logger under the package namespace (handlers live on the package logger)."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(config: AppConfig, console: bool = True) -> logging.Logger:
    """
    Attach the daily file handler and the console handler to the package
    logger and return it. Safe to call again; old handlers are closed first.
    """
    logger = logging.getLogger(LOGGER_NAME)
    shutdown_logging(logger)

    level = LOG_LEVELS[config.log_level]
    logger.setLevel(level)

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file_path(log_dir), mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(JsonLinesFormatter())
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(verbose=config.verbose))
        logger.addHandler(console_handler)

    return logger


def shutdown_logging(logger: Optional[logging.Logger] = None) -> None:
    """Flush and detach every handler on the package logger and reset its level."""
    logger = logger or logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        try:
            handler.flush()
        finally:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
