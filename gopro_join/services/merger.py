"""Merging of one recording group.

States run in order: init, write input list, probe durations, stream
convert, finalize. A failure in any state aborts the group only; nothing is
retried. The progress handle is finished exactly once and the temporary
input list is removed on every exit path.
"""
from __future__ import annotations

import logging
import os
import tempfile
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from ..core.config import Toolchain
from ..core.errors import FailedToGetInfo, MergeError
from ..core.models import RecordingGroup
from ..core.protocols import Progress
from ..engines.ffmpeg import FFmpegCommand, MergeCommand, ProbeCommand
from ..engines.telemetry import probe_duration, track_progress

logger = logging.getLogger(__name__)


class MergeState(Enum):
    """Where a group's merge is."""
    INIT = "init"
    WRITE_INPUT_LIST = "write_input_list"
    PROBE_DURATIONS = "probe_durations"
    STREAM_CONVERT = "stream_convert"
    FINALIZE = "finalize"


def concat_line(path: Path) -> str:
    """One concat demuxer entry, CRLF terminated."""
    escaped = str(path).replace("'", "'\\''")
    return f"file '{escaped}'\r\n"


def write_input_list(
    name: str,
    sources: Sequence[Path],
    temp_dir: Optional[Path] = None,
) -> Path:
    """Write the concat list for ``sources`` to a new temporary file.

    The file name starts with ``.<name>.`` so lists of concurrently merged
    groups never collide. The caller owns the returned file.
    """
    fd, raw_path = tempfile.mkstemp(
        prefix=f".{name}.",
        suffix=".txt",
        dir=temp_dir,
        text=True,
    )
    path = Path(raw_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            for source in sources:
                f.write(concat_line(source))
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    return path


class FFmpegMerger:
    """Merges one group's chapters into a single file with ffmpeg.

    Implements the Merger protocol. All dependencies are injected - no
    global state.
    """

    def __init__(
        self,
        progress: Progress,
        group: RecordingGroup,
        movies_path: Path,
        merged_output_path: Path,
        toolchain: Optional[Toolchain] = None,
        ffmpeg_log_dir: Optional[Path] = None,
        temp_dir: Optional[Path] = None,
    ):
        """Initialize the merger.

        Args:
            progress: Handle for this group, finished when merge() returns.
            group: Group to merge.
            movies_path: Directory holding the chapter files.
            merged_output_path: Directory the merged file is written to.
            toolchain: ffmpeg/ffprobe commands.
            ffmpeg_log_dir: Directory for ffmpeg's stderr, discarded if None.
            temp_dir: Directory for the input list, system temp if None.
        """
        self._progress = progress
        self._group = group
        self._movies_path = movies_path
        self._merged_output_path = merged_output_path
        self._toolchain = toolchain or Toolchain()
        self._ffmpeg_log_dir = ffmpeg_log_dir
        self._temp_dir = temp_dir
        self._state = MergeState.INIT

    @property
    def group(self) -> RecordingGroup:
        return self._group

    @property
    def state(self) -> MergeState:
        return self._state

    @property
    def output_file(self) -> Path:
        return self._group.output_path(self._merged_output_path)

    def merge(self) -> Path:
        """Run the merge.

        Returns:
            Path of the merged file.

        Raises:
            MergeError: If probing or converting fails.
            OSError: If the input list cannot be written.
        """
        group = self._group
        output_file = self.output_file
        movies_full_paths = group.chapter_paths(self._movies_path)
        input_list: Optional[Path] = None

        try:
            self._enter(MergeState.WRITE_INPUT_LIST)
            input_list = write_input_list(group.name, movies_full_paths, self._temp_dir)
            logger.debug("Wrote %s input list %s", group.name, input_list)

            self._enter(MergeState.PROBE_DURATIONS)
            logger.debug("Calculating total duration for group %s", group.name)
            duration = calculate_total_duration(movies_full_paths, self._toolchain)
            logger.debug("Total duration for group %s is %s", group.name, duration)

            self._enter(MergeState.STREAM_CONVERT)
            self._convert(input_list, output_file, duration)
        except BaseException as e:
            logger.debug("Group %s failed during %s: %s", group.name, self._state.value, e)
            self._enter(MergeState.FINALIZE)
            self._progress.finish(str(e) or type(e).__name__)
            raise
        else:
            self._enter(MergeState.FINALIZE)
            self._progress.finish()
        finally:
            if input_list is not None:
                input_list.unlink(missing_ok=True)

        return output_file

    def _enter(self, state: MergeState) -> None:
        self._state = state

    def _convert(self, input_list: Path, output_file: Path, duration: timedelta) -> None:
        stderr_log = None
        if self._ffmpeg_log_dir is not None:
            stderr_log = self._ffmpeg_log_dir / f"{self._group.name}.log"

        kind = MergeCommand(input_list=input_list, output=output_file, stderr_log=stderr_log)
        with FFmpegCommand(kind, self._toolchain).spawn() as cmd:
            logger.debug("Setting progress length for %s to %s", self._group.name, duration)
            self._progress.set_length(duration)
            track_progress(cmd.stdout(), self._update)
            cmd.wait_success()

    def _update(self, elapsed: timedelta) -> None:
        logger.debug("Updating progress for %s to %s", self._group.name, elapsed)
        self._progress.update(elapsed)


def probe_file_duration(path: Path, toolchain: Optional[Toolchain] = None) -> timedelta:
    """Duration of one source file.

    Raises:
        FailedToGetInfo: If ffprobe cannot be run or fails.
    """
    try:
        with FFmpegCommand(ProbeCommand(path), toolchain).spawn() as cmd:
            duration = probe_duration(cmd.stdout())
            cmd.wait_success()
    except (MergeError, OSError) as e:
        raise FailedToGetInfo(str(path)) from e
    return duration


def calculate_total_duration(
    paths: Sequence[Path],
    toolchain: Optional[Toolchain] = None,
) -> timedelta:
    """Sum of the probed durations of ``paths``."""
    return sum(
        (probe_file_duration(path, toolchain) for path in paths),
        timedelta(),
    )
