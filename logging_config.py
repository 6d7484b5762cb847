"""
logging_config.py - Logging setup for the upn2epc converter.

Library modules (decode, validate, encode, convert) only ever call
`get_logger`; they never configure handlers. The CLI calls
`setup_logging` once, after reading --verbose/--log-json and the
LOG_LEVEL/LOG_JSON environment. Log output goes to stderr so stdout
carries nothing but the EPC payload.
"""

from __future__ import annotations

import json
import logging
import sys

LEVEL_NAMES: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record. Payload text (quotes, newlines) is escaped."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%H:%M:%S"),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: int = logging.INFO, json_format: bool = False) -> None:
    """Configure the root logger for the CLI.

    Args:
        level: Logging level.
        json_format: If True, emit one JSON object per line.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JsonLineFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(name)-12s] %(levelname)-7s %(message)s",
            datefmt="%H:%M:%S",
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map a LOG_LEVEL value such as 'debug' to its logging constant."""
    if not name:
        return default
    return LEVEL_NAMES.get(name.strip().upper(), default)


def get_logger(name: str) -> logging.Logger:
    """Logger for one pipeline module, e.g. get_logger(__name__) in decode.py."""
    return logging.getLogger(name)
