"""
Progress reporting for long-running setup phases.

A phase acquires a progress bar with `progress_bar(interactive)` and the
spinner is stopped when the `with` block exits, whether or not it raised.
Batch (non-interactive) runs get a no-op implementation.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from rich.console import Console
from rich.status import Status


class ProgressBar(Protocol):
    """Progress channel used by the setup service."""

    def start(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def close(self) -> None: ...


class NoopProgressBar:
    """Progress bar that reports nothing."""

    def start(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def close(self) -> None:
        pass


class ConsoleProgressBar:
    """Spinner plus status lines rendered with rich."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        self._status: Status | None = None

    def start(self, message: str) -> None:
        self._console.print(message)
        if self._status is None:
            self._status = self._console.status("", spinner="dots")
            self._status.start()

    def info(self, message: str) -> None:
        self._console.print(message, highlight=False)

    def close(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    @property
    def running(self) -> bool:
        return self._status is not None


def create_progress_bar(interactive: bool, console: Console | None = None) -> ProgressBar:
    """Return a console progress bar for interactive runs, a no-op one otherwise."""
    if interactive:
        return ConsoleProgressBar(console)
    return NoopProgressBar()


@contextmanager
def progress_bar(interactive: bool, console: Console | None = None) -> Iterator[ProgressBar]:
    """Scoped progress bar; always closed on exit."""
    bar = create_progress_bar(interactive, console)
    try:
        yield bar
    finally:
        bar.close()
