"""CLI wrappers for developer tooling: tests, lint and formatting.

Extra command-line arguments are passed through to the underlying tool, and
its exit code becomes ours.
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence

SOURCE_DIRS = ("okta_setup", "cli", "tests")


def run(cmd: Sequence[str]) -> None:
    result = subprocess.run(cmd)
    raise SystemExit(result.returncode)


def test() -> None:
    run([sys.executable, "-m", "pytest", "-q", *sys.argv[1:]])


def lint() -> None:
    run([sys.executable, "-m", "ruff", "check", *SOURCE_DIRS, *sys.argv[1:]])


def fmt() -> None:
    run([sys.executable, "-m", "ruff", "format", *SOURCE_DIRS, *sys.argv[1:]])
