"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from datetime import timedelta
from pathlib import Path
from typing import IO, Optional, Protocol

from .models import RecordingGroup


class Progress(Protocol):
    """Progress handle for one group.

    Written only by the worker merging that group.
    """

    @abstractmethod
    def set_length(self, length: timedelta) -> None:
        """Set the expected duration of the merged output."""
        ...

    @abstractmethod
    def update(self, elapsed: timedelta) -> None:
        """Report how much of the output has been written."""
        ...

    @abstractmethod
    def finish(self, error: Optional[str] = None) -> None:
        """Mark the group done. Called exactly once, with a message on failure."""
        ...


class Reporter(Protocol):
    """Interface for progress reporting across all groups.

    Implementations:
    - RichProgressReporter: one live bar per group
    - JsonProgressReporter: JSON lines for other programs
    """

    @abstractmethod
    def add(self, group: RecordingGroup, index: int, total: int) -> Progress:
        """Create the progress handle for a group before any work starts."""
        ...

    @abstractmethod
    def wait(self) -> None:
        """Block until every created handle has finished."""
        ...


class Command(Protocol):
    """A spawnable external process with a readable stdout."""

    @abstractmethod
    def spawn(self) -> "Command":
        """Start the process. Raises OSError if it cannot be started."""
        ...

    @abstractmethod
    def stdout(self) -> IO[str]:
        """Standard output of the running process."""
        ...

    @abstractmethod
    def wait_success(self) -> None:
        """Wait for exit and raise if the process failed."""
        ...


class Merger(Protocol):
    """Merges one group, finishing its progress handle exactly once."""

    @abstractmethod
    def merge(self) -> Path:
        """Run the merge and return the merged file's path."""
        ...
