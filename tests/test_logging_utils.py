"""Tests for logging configuration behavior."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from citylens.logging_utils import JsonLogFormatter, configure_logging, get_logger


def test_configure_logging_overwrites_previous_run_log(tmp_path: Path) -> None:
    """Each configure call should start a fresh log file for the new run."""
    log_path = tmp_path / "citylens.log"

    first_logger = configure_logging(log_file=log_path, verbose=False)
    first_logger.info("from first run")

    second_logger = configure_logging(log_file=log_path, verbose=False)
    second_logger.info("from second run")

    content = log_path.read_text(encoding="utf-8")

    assert "from second run" in content
    assert "from first run" not in content


def test_child_loggers_write_to_configured_file(tmp_path: Path) -> None:
    log_path = tmp_path / "nested" / "citylens.log"
    configure_logging(log_file=log_path, verbose=True)

    get_logger("controller").debug("draft %s selected image", "abc")

    content = log_path.read_text(encoding="utf-8")
    assert "citylens.controller" in content
    assert "draft abc selected image" in content


def test_json_formatter_emits_json() -> None:
    record = logging.LogRecord(
        name="citylens.delivery",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Submitting report: %s",
        args=("r1",),
        exc_info=None,
    )
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "citylens.delivery"
    assert payload["message"] == "Submitting report: r1"
