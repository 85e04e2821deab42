"""Cross-platform CI entrypoint for CityLens quality gates."""

from __future__ import annotations

import subprocess  # nosec B404
import sys
from collections.abc import Sequence


def _run(args: Sequence[str]) -> int:
    """Run one command and return its exit code."""
    command = " ".join(args)
    print(f"$ {command}")
    result = subprocess.run(args, check=False)  # nosec B603
    if result.returncode != 0:
        print(f"Command failed with exit code {result.returncode}: {command}")
    return int(result.returncode)


def main() -> int:
    """Run lint, type checks and tests, stopping at the first failure."""
    commands: list[list[str]] = [
        [sys.executable, "-m", "ruff", "check", "."],
        [sys.executable, "-m", "mypy", "citylens", "ui"],
        [sys.executable, "-m", "pytest"],
    ]
    for args in commands:
        exit_code = _run(args)
        if exit_code != 0:
            return exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
