"""Module entrypoint for python -m citylens."""

from __future__ import annotations

from citylens.cli import app
from citylens.logging_utils import configure_json_logging

if __name__ == "__main__":
    configure_json_logging()
    app()
