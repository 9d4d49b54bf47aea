"""Machine-readable progress reporter.

Progress goes to stdout as one JSON object per line::

    {"name": "GH001234.mp4", "chapters": 2, "index": 0, "totalGroups": 3,
     "length": "00:10:02", "elapsedTime": "00:04:11", "percentage": 42}

Errors go to stderr with an ``err`` field instead of the elapsed time and
percentage.
"""
from __future__ import annotations

import json
import logging
import queue
import sys
import threading
from datetime import timedelta
from typing import Any, Optional, Sequence, TextIO

from ..core.models import ProcessingStats, RecordingGroup
from .formatting import format_duration, percentage

logger = logging.getLogger(__name__)


class JsonGroupProgress:
    """Progress handle for one group.

    Completion is signalled on a private one-shot channel that
    ``JsonProgressReporter.wait()`` receives from.
    """

    def __init__(
        self,
        reporter: "JsonProgressReporter",
        group: RecordingGroup,
        index: int,
        total: int,
    ):
        self._reporter = reporter
        self._group = group
        self._index = index
        self._total = total
        self._length: Optional[timedelta] = None
        self._done: queue.Queue[Optional[str]] = queue.Queue(maxsize=1)
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def _base_record(self) -> dict[str, Any]:
        return {
            "name": self._group.name,
            "chapters": len(self._group.chapters),
            "index": self._index,
            "totalGroups": self._total,
            "length": format_duration(self._length),
        }

    def set_length(self, length: timedelta) -> None:
        self._length = length

    def update(self, elapsed: timedelta) -> None:
        record = self._base_record()
        record["elapsedTime"] = format_duration(elapsed)
        record["percentage"] = percentage(elapsed, self._length)
        self._reporter.emit(record)

    def finish(self, error: Optional[str] = None) -> None:
        if self._finished:
            logger.warning("Progress for %s finished twice", self._group.name)
            return
        self._finished = True

        if error:
            record = self._base_record()
            record["err"] = error
            self._reporter.emit_error(record)
        self._done.put(error)

    def wait(self) -> Optional[str]:
        """Block until finished; returns the error message, if any."""
        return self._done.get()


class JsonProgressReporter:
    """Reporter writing JSON lines for other programs to consume.

    Implements the Reporter protocol.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        """Initialize the reporter.

        Args:
            out: Stream for progress lines (stdout by default).
            err: Stream for error lines (stderr by default).
        """
        self._out = out
        self._err = err
        self._lock = threading.Lock()
        self._handles: list[JsonGroupProgress] = []

    def add(self, group: RecordingGroup, index: int, total: int) -> JsonGroupProgress:
        handle = JsonGroupProgress(self, group, index, total)
        with self._lock:
            self._handles.append(handle)
        return handle

    def wait(self) -> None:
        """Receive the completion signal of every handle once."""
        received = 0
        while True:
            with self._lock:
                if received >= len(self._handles):
                    return
                handle = self._handles[received]
            handle.wait()
            received += 1

    def emit(self, record: dict[str, Any]) -> None:
        self._write(self._out or sys.stdout, record)

    def emit_error(self, record: dict[str, Any]) -> None:
        self._write(self._err or sys.stderr, record)

    def _write(self, stream: TextIO, record: dict[str, Any]) -> None:
        line = json.dumps(record)
        with self._lock:
            stream.write(line + "\n")
            stream.flush()

    # --- Messages ---

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        self.emit_error({"err": message})

    def print_groups(self, groups: Sequence[RecordingGroup]) -> None:
        """One line per group with the chapter files it would merge."""
        for index, group in enumerate(groups):
            self.emit({
                "name": group.name,
                "chapters": len(group.chapters),
                "index": index,
                "totalGroups": len(groups),
                "files": [group.chapter_file_name(chapter) for chapter in group.chapters],
            })

    def print_stats(self, stats: ProcessingStats) -> None:
        record: dict[str, Any] = dict(stats.summary())
        record["elapsedSeconds"] = round(stats.elapsed_seconds, 3)
        self.emit(record)
