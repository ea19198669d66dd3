"""Rich-based progress reporter for terminal output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from rich.console import Console

    from cachedfonts.core.ports import DownloadProgressCallback


class RichProgressReporter:
    """Progress reporter using Rich for terminal display.

    Each task is a bar from 0 to 1, driven by the fraction downloaded.
    Supports multiple concurrent downloads.

    Example:
        with RichProgressReporter() as reporter:
            font_cache.cache_fonts(urls, progress=reporter)
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the progress display."""
        self._progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        self._tasks: dict[str, TaskID] = {}
        self._started = False

    def __enter__(self) -> RichProgressReporter:
        """Start the progress display."""
        self._progress.start()
        self._started = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the progress display."""
        self._progress.stop()
        self._started = False

    def start_task(self, name: str) -> DownloadProgressCallback:
        """Start tracking a download task.

        Args:
            name: Human-readable name for the task.

        Returns:
            A callback receiving the fraction downloaded.
        """
        # Auto-start if not in context manager
        if not self._started:
            self._progress.start()
            self._started = True

        task_id = self._progress.add_task(name, total=1.0)
        self._tasks[name] = task_id

        def callback(fraction: float) -> None:
            self._progress.update(task_id, completed=min(fraction, 1.0))

        return callback

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name.
        """
        if name in self._tasks:
            self._progress.update(self._tasks[name], completed=1.0)

    def completed(self, name: str) -> float:
        """Return the fraction shown for a task, or 0.0 if unknown."""
        if name not in self._tasks:
            return 0.0
        return self._progress.tasks[self._tasks[name]].completed
