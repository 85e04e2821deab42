"""Logging configuration helpers for CityLens."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

_LOGGER_NAME = "citylens"


class JsonLogFormatter(logging.Formatter):
    """Format log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a log record in JSON format."""
        payload = {
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        return json.dumps(payload)


def _close_handlers(logger: logging.Logger) -> None:
    """Detach and close all handlers currently bound to the logger."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(*, log_file: Path, verbose: bool) -> logging.Logger:
    """Configure file logging for the CityLens server and CLI.

    Logging is reconfigured on every invocation and the target file is
    truncated so each run has an isolated log history.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    _close_handlers(logger)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    log_path = log_file.expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def configure_json_logging() -> None:
    """Configure root logger to use the JSON formatter when none is installed."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonLogFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the CityLens logger (or a child), with a null handler fallback."""
    root = logging.getLogger(_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    if name is None:
        return root
    return root.getChild(name)
