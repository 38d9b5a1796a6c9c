"""Logging setup for oaisdk.

File loggers write to ``~/.oaisdk/logs/<name>.log``. Each logger is isolated
(no propagation) and avoids duplicate handlers across repeated
initializations.

``oaisdk batch`` commands write to the ``http`` logger: one line per HTTP
round trip, rendered from the ``request_complete`` fields ``HttpClient``
emits (method and path, status, ``x-request-id`` and duration).
"""

from __future__ import annotations

import logging
from pathlib import Path

from oaisdk.config import LogLevel
from oaisdk.http import EventLogger
from oaisdk.paths import logs_dir


def log_file_path(name: str, base_dir: Path | None = None) -> Path:
    return logs_dir(base_dir) / f"{name}.log"


def configure_file_logger(
    name: str,
    *,
    log_level: LogLevel | str = LogLevel.INFO,
    base_dir: Path | None = None,
) -> logging.Logger:
    """Configure and return a file logger under the ``oaisdk`` namespace.

    Subsequent calls with the same name return the same logger without
    duplicating handlers.
    """

    logger = logging.getLogger(f"oaisdk.file.{name}")

    level_value = _to_logging_level(log_level)
    logger.setLevel(level_value)
    logger.propagate = False

    if not logger.handlers:
        path = log_file_path(name, base_dir)
        path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(level_value)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger


def request_event_logger(logger: logging.Logger) -> EventLogger:
    """Adapt a stdlib logger to the ``(event, fields)`` callback ``HttpClient`` accepts."""

    def _log(event: str, fields: dict[str, object]) -> None:
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        logger.info("%s %s", event, rendered)

    return _log


def _to_logging_level(value: LogLevel | str) -> int:
    mapping = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }
    if isinstance(value, LogLevel):
        return mapping[value]
    if isinstance(value, str):
        try:
            return mapping[LogLevel(value)]
        except ValueError:
            return logging.WARNING
    return logging.WARNING


__all__ = [
    "configure_file_logger",
    "log_file_path",
    "request_event_logger",
    "_to_logging_level",
]
