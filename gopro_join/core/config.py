"""Configuration dataclasses with validation."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class ReporterKind(Enum):
    """How progress is reported."""
    TERMINAL = "terminal"  # Live progress bars
    JSON = "json"          # One JSON object per line


def default_workers() -> int:
    """Host parallelism."""
    return os.cpu_count() or 1


@dataclass(frozen=True, slots=True)
class Toolchain:
    """Argument vector prefixes for the external tools.

    Each entry is the program plus any leading arguments, so tests can run
    ``(sys.executable, "fake_ffmpeg.py")`` in place of a real binary.
    """
    ffmpeg: tuple[str, ...] = ("ffmpeg",)
    ffprobe: tuple[str, ...] = ("ffprobe",)

    def __post_init__(self) -> None:
        if not self.ffmpeg or not self.ffprobe:
            raise ValueError("Tool commands must not be empty")

    @classmethod
    def from_paths(
        cls,
        ffmpeg: Optional[str] = None,
        ffprobe: Optional[str] = None,
    ) -> "Toolchain":
        default = cls()
        return cls(
            ffmpeg=(ffmpeg,) if ffmpeg else default.ffmpeg,
            ffprobe=(ffprobe,) if ffprobe else default.ffprobe,
        )


@dataclass(slots=True)
class JoinConfig:
    """Main configuration for a join run.

    All fields are validated on construction.
    This is the only configuration object passed through the system.
    """
    # Required
    input_dir: Path

    # Output
    output_dir: Optional[Path] = None

    # Performance
    workers: int = field(default_factory=default_workers)

    # Reporting
    reporter: ReporterKind = ReporterKind.TERMINAL
    verbose: bool = False

    # External tools
    toolchain: Toolchain = field(default_factory=Toolchain)
    ffmpeg_log_dir: Optional[Path] = None

    # Execution mode
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.input_dir.is_dir():
            raise ValueError(f"Input path is not a directory: {self.input_dir}")

        if self.workers < 1:
            raise ValueError("Workers must be at least 1")

        # Output defaults to input
        if self.output_dir is None:
            self.output_dir = self.input_dir

        if not self.dry_run:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            if self.ffmpeg_log_dir is not None:
                self.ffmpeg_log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def resolved_output_dir(self) -> Path:
        return self.output_dir or self.input_dir
