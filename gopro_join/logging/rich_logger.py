"""Rich-based progress reporter implementation."""
from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Optional, Sequence

from rich.console import Console
from rich.progress import (
    Progress,
    ProgressColumn,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskID,
    Task,
)
from rich.table import Table
from rich.text import Text

from ..core.models import ProcessingStats, RecordingGroup
from .formatting import format_duration, percentage

logger = logging.getLogger(__name__)


class MergeStatusColumn(ProgressColumn):
    """Renders ``elapsed / length`` while merging, then the outcome."""

    def render(self, task: Task) -> Text:
        """Render the status column."""
        error = task.fields.get("error")
        if error:
            return Text(f"✗ {error}", style="red")

        length = task.fields.get("length")
        if task.finished:
            return Text(f"✓ {format_duration(length)}", style="green")

        elapsed = task.fields.get("elapsed") or timedelta()
        return Text(
            f"{format_duration(elapsed)} / {format_duration(length)}",
            style="cyan",
        )


class RichGroupProgress:
    """Progress handle for one group, drawn as one bar.

    Implements the Progress protocol.
    """

    def __init__(self, reporter: "RichProgressReporter", task_id: TaskID, group: RecordingGroup):
        self._reporter = reporter
        self._task_id = task_id
        self._group = group
        self._length: Optional[timedelta] = None
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def set_length(self, length: timedelta) -> None:
        """Set the expected merged duration."""
        self._length = length
        self._reporter.progress.update(self._task_id, length=length)

    def update(self, elapsed: timedelta) -> None:
        """Move the bar to ``elapsed`` out of the length."""
        self._reporter.progress.update(
            self._task_id,
            completed=percentage(elapsed, self._length),
            elapsed=elapsed,
        )

    def finish(self, error: Optional[str] = None) -> None:
        """Mark success, or show ``error`` inline on the bar."""
        if self._finished:
            logger.warning("Progress for %s finished twice", self._group.name)
            return
        self._finished = True

        if error:
            self._reporter.progress.update(self._task_id, error=error)
        else:
            self._reporter.progress.update(self._task_id, completed=100)
        self._reporter.progress.stop_task(self._task_id)
        self._reporter._handle_finished()


class RichProgressReporter:
    """Progress reporter using Rich for live terminal output.

    Implements the Reporter protocol. Every group gets a bar on one shared
    Progress display; ``wait()`` returns once all bars are finished and the
    display is closed.
    """

    def __init__(self, console: Optional[Console] = None, refresh_per_second: float = 10):
        """Initialize the reporter.

        Args:
            console: Console to draw on (stderr by default).
            refresh_per_second: Redraw rate of the live display.
        """
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description:<20}"),
            BarColumn(bar_width=40, style="blue", complete_style="cyan"),
            MergeStatusColumn(),
            console=self._console,
            refresh_per_second=refresh_per_second,
            transient=False,
        )
        self._lock = threading.Condition()
        self._handles: list[RichGroupProgress] = []
        self._finished = 0
        self._started = False

    @property
    def console(self) -> Console:
        return self._console

    @property
    def progress(self) -> Progress:
        return self._progress

    def add(self, group: RecordingGroup, index: int, total: int) -> RichGroupProgress:
        """Add a bar for ``group`` (``index`` of ``total``, zero based)."""
        with self._lock:
            if not self._started:
                self._progress.start()
                self._started = True

            task_id = self._progress.add_task(
                f"{group.name} ({len(group.chapters)}) {index + 1}/{total}",
                total=100,
                length=None,
                elapsed=None,
                error=None,
            )
            handle = RichGroupProgress(self, task_id, group)
            self._handles.append(handle)
            return handle

    def wait(self) -> None:
        """Block until every bar is finished, then close the display."""
        with self._lock:
            self._lock.wait_for(lambda: self._finished >= len(self._handles))
            if self._started:
                self._progress.stop()
                self._started = False

    def _handle_finished(self) -> None:
        with self._lock:
            self._finished += 1
            self._lock.notify_all()

    # --- Messages ---

    def info(self, message: str) -> None:
        """Print an info message."""
        self._console.print(f"[blue]ℹ[/blue] {message}")

    def error(self, message: str) -> None:
        """Print an error message."""
        self._console.print(f"[red]✗[/red] {message}", style="red")

    def print_groups(self, groups: Sequence[RecordingGroup]) -> None:
        """Print the groups that would be merged."""
        table = Table(title="Recordings", show_header=True, header_style="bold")
        table.add_column("Output", style="cyan")
        table.add_column("Chapters", style="white")

        for group in groups:
            table.add_row(
                group.name,
                ", ".join(group.chapter_file_name(chapter) for chapter in group.chapters),
            )

        self._console.print(table)

    def print_stats(self, stats: ProcessingStats) -> None:
        """Print run statistics."""
        table = Table(title="Merge Complete", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green", justify="right")

        table.add_row("Groups", str(stats.total_groups))
        table.add_row("Merged", str(stats.merged))
        table.add_row("Failed", str(stats.failed))

        if stats.elapsed_seconds > 0:
            table.add_row("", "")
            table.add_row("Time Elapsed", f"{stats.elapsed_seconds:.1f}s")

        self._console.print(table)

    def __enter__(self) -> "RichProgressReporter":
        return self

    def __exit__(self, *args) -> None:
        if self._started:
            self._progress.stop()
            self._started = False
