"""Terminal progress rendering for command-line runs."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TransferSpeedColumn,
)


class SpinnerProgress:
    """Single-line spinner whose description follows the latest update.

    Use as a context manager; with ``enabled=False`` nothing is drawn.
    """

    def __init__(self, *, enabled: bool = True, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
            disable=not enabled,
        )
        self._task: TaskID | None = None

    def __enter__(self) -> "SpinnerProgress":
        self._progress.start()
        self._task = self._progress.add_task("Starting...", total=None)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._progress.stop()
        self._task = None

    def update(self, message: str) -> None:
        if self._task is None:
            return
        self._progress.update(self._task, description=message)


def download_progress(*, enabled: bool = True, console: Console | None = None) -> Progress:
    """Byte-count progress bar for file downloads."""

    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeElapsedColumn(),
        console=console or Console(stderr=True),
        disable=not enabled,
    )
