"""ffmpeg and ffprobe processes.

Argument vectors are built by a pure function over the command kinds so they
can be checked without launching anything. ``FFmpegCommand`` owns the
process lifecycle: spawn, read stdout, wait for a successful exit.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Union

from ..core.config import Toolchain
from ..core.errors import CommandNotSpawned, FailedToConvert, NoStdout

logger = logging.getLogger(__name__)

FFMPEG_PROCESS_NAME = "ffmpeg"
FFPROBE_PROCESS_NAME = "ffprobe"


@dataclass(frozen=True, slots=True)
class MergeCommand:
    """Concatenate the files listed in ``input_list`` into ``output``.

    See https://trac.ffmpeg.org/wiki/Concatenate
    """
    input_list: Path
    output: Path
    stderr_log: Optional[Path] = None

    @property
    def process_name(self) -> str:
        return FFMPEG_PROCESS_NAME

    @property
    def source(self) -> Path:
        return self.input_list


@dataclass(frozen=True, slots=True)
class ProbeCommand:
    """Report the streams of one source file."""
    input: Path

    @property
    def process_name(self) -> str:
        return FFPROBE_PROCESS_NAME

    @property
    def source(self) -> Path:
        return self.input


CommandKind = Union[MergeCommand, ProbeCommand]


def build_args(kind: CommandKind) -> list[str]:
    """Arguments for ``kind``, without the program itself."""
    match kind:
        case MergeCommand(input_list=input_list, output=output):
            return [
                "-f", "concat",
                "-safe", "0",
                "-y",
                "-i", str(input_list),
                "-c", "copy",
                str(output),
                "-loglevel", "error",
                "-progress", "pipe:1",
            ]
        case ProbeCommand(input=source):
            return [
                "-i", str(source),
                "-show_streams",
                "-loglevel", "error",
            ]
    raise TypeError(f"Unknown command kind: {kind!r}")


def build_argv(kind: CommandKind, toolchain: Toolchain) -> list[str]:
    """Full argument vector, program first."""
    program = toolchain.ffmpeg if isinstance(kind, MergeCommand) else toolchain.ffprobe
    return [*program, *build_args(kind)]


class FFmpegCommand:
    """One external process run. Implements the Command protocol.

    Usage:
        with FFmpegCommand(ProbeCommand(path), toolchain).spawn() as cmd:
            duration = probe_duration(cmd.stdout())
            cmd.wait_success()

    Leaving the ``with`` block kills the process if it is still running.
    """

    def __init__(self, kind: CommandKind, toolchain: Optional[Toolchain] = None):
        self._kind = kind
        self._argv = build_argv(kind, toolchain or Toolchain())
        self._process: Optional[subprocess.Popen] = None
        self._stderr: Optional[IO[bytes]] = None

        logger.debug("Creating %s command with args %s", kind.process_name, self._argv[1:])

    @property
    def kind(self) -> CommandKind:
        return self._kind

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    def spawn(self) -> "FFmpegCommand":
        """Start the process.

        Raises:
            OSError: If the program cannot be started.
        """
        stderr_log = getattr(self._kind, "stderr_log", None)
        if stderr_log is not None:
            self._stderr = open(stderr_log, "wb")

        try:
            self._process = subprocess.Popen(
                self._argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=self._stderr if self._stderr is not None else subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,  # Line buffered
            )
        except OSError:
            self._close_stderr()
            raise
        return self

    def stdout(self) -> IO[str]:
        """Readable stdout of the spawned process."""
        if self._process is None:
            raise CommandNotSpawned(self._kind.process_name)
        if self._process.stdout is None:
            raise NoStdout(self._kind.process_name)
        return self._process.stdout

    def wait_success(self) -> None:
        """Wait for the process and check its exit status.

        Raises:
            CommandNotSpawned: If ``spawn`` was never called.
            FailedToConvert: On a non-zero exit status.
        """
        if self._process is None:
            raise CommandNotSpawned(self._kind.process_name)

        # Drain unread output so the process cannot block on a full pipe
        try:
            self._process.communicate()
        finally:
            self._close_stderr()

        exit_status = self._process.returncode
        if exit_status != 0:
            raise FailedToConvert(
                f"{self._kind.process_name} {self._kind.source}",
                exit_status,
            )

    def kill(self) -> None:
        """Terminate a process that is still running."""
        if self._process is not None and self._process.poll() is None:
            logger.debug("Killing %s", self._kind.process_name)
            self._process.kill()
            self._process.wait()
        self._close_pipes()

    def _close_pipes(self) -> None:
        if self._process is not None and self._process.stdout is not None:
            self._process.stdout.close()
        self._close_stderr()

    def _close_stderr(self) -> None:
        if self._stderr is not None:
            self._stderr.close()
            self._stderr = None

    def __enter__(self) -> "FFmpegCommand":
        return self

    def __exit__(self, *args) -> None:
        self.kill()
