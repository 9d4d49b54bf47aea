"""Test fixtures for merge tests.

Fake ffmpeg and ffprobe are small Python scripts written to disk. Each
fixture knows how to create its script and what it will report, so tests can
check the merger against known durations and progress lines.
"""
from __future__ import annotations

import json
import os
import stat
import sys
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

from gopro_join.core.config import Toolchain


_FFPROBE_SCRIPT = """\
import sys
print("[STREAM]")
print("index=0")
print("codec_name=h264")
print("duration={duration}")
print("[/STREAM]")
sys.exit({exit_code})
"""

_FFMPEG_SCRIPT = """\
import json
import pathlib
import sys

args = sys.argv[1:]
input_list = pathlib.Path(args[args.index("-i") + 1])
output = pathlib.Path(args[args.index("copy") + 1])

with open(input_list, encoding="utf-8", newline="") as f:
    content = f.read()
pathlib.Path({record!r}).write_text(
    json.dumps({{"args": args, "list": str(input_list), "content": content}}),
    encoding="utf-8",
)

for out_time in {out_times!r}:
    print("frame=1")
    print("out_time=" + out_time)
    print("progress=continue", flush=True)

if {exit_code} == 0:
    output.write_bytes(b"merged")
print("progress=end")
sys.exit({exit_code})
"""


def _write_script(path: Path, source: str, executable: bool) -> tuple[str, ...]:
    if executable:
        path.write_text(f"#!{sys.executable}\n{source}", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return (str(path),)
    path.write_text(source, encoding="utf-8")
    return (sys.executable, str(path))


@dataclass
class FakeFFprobe:
    """ffprobe that reports one stream with a fixed duration."""
    duration: str = "5.449002"
    exit_code: int = 0

    def create(self, base_path: Path, executable: bool = False) -> tuple[str, ...]:
        """Write the script and return the command that runs it."""
        source = _FFPROBE_SCRIPT.format(duration=self.duration, exit_code=self.exit_code)
        return _write_script(base_path / "fake_ffprobe.py", source, executable)

    def expected_duration(self, chapters: int) -> timedelta:
        seconds, _, micros = self.duration.partition(".")
        return timedelta(seconds=int(seconds), microseconds=int(micros or 0)) * chapters


@dataclass
class FakeFFmpeg:
    """ffmpeg that records its concat list, prints progress and writes the output."""
    out_times: list[str] = field(
        default_factory=lambda: ["00:00:05.000000", "00:00:10.898004"]
    )
    exit_code: int = 0
    record_name: str = "ffmpeg_call.json"

    def create(self, base_path: Path, executable: bool = False) -> tuple[str, ...]:
        """Write the script and return the command that runs it."""
        source = _FFMPEG_SCRIPT.format(
            record=str(base_path / self.record_name),
            out_times=self.out_times,
            exit_code=self.exit_code,
        )
        return _write_script(base_path / "fake_ffmpeg.py", source, executable)

    def recorded_call(self, base_path: Path) -> dict[str, Any]:
        """Arguments and concat list content seen by the last run."""
        return json.loads((base_path / self.record_name).read_text(encoding="utf-8"))

    def was_called(self, base_path: Path) -> bool:
        return (base_path / self.record_name).exists()


def make_toolchain(
    base_path: Path,
    ffmpeg: Optional[FakeFFmpeg] = None,
    ffprobe: Optional[FakeFFprobe] = None,
) -> Toolchain:
    """Toolchain running fake tools written to ``base_path``."""
    tools = base_path / "tools"
    tools.mkdir(exist_ok=True)
    return Toolchain(
        ffmpeg=(ffmpeg or FakeFFmpeg()).create(tools),
        ffprobe=(ffprobe or FakeFFprobe()).create(tools),
    )


def create_chapters(directory: Path, names: list[str]) -> list[Path]:
    """Create empty chapter files."""
    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(b"")
        paths.append(path)
    return paths


def list_temp_inputs(directory: Path) -> list[str]:
    """Names of concat lists left behind in ``directory``."""
    return sorted(name for name in os.listdir(directory) if name.endswith(".txt"))


class RecordingProgress:
    """Progress handle that records every call."""

    def __init__(self) -> None:
        self.length: Optional[timedelta] = None
        self.updates: list[timedelta] = []
        self.finish_calls: list[Optional[str]] = []
        self._done = threading.Event()

    @property
    def error(self) -> Optional[str]:
        return self.finish_calls[0] if self.finish_calls else None

    def set_length(self, length: timedelta) -> None:
        self.length = length

    def update(self, elapsed: timedelta) -> None:
        self.updates.append(elapsed)

    def finish(self, error: Optional[str] = None) -> None:
        self.finish_calls.append(error)
        self._done.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)


class RecordingReporter:
    """Reporter handing out RecordingProgress handles."""

    def __init__(self) -> None:
        self.added: list[tuple[str, int, int]] = []
        self.handles: list[RecordingProgress] = []
        self.waited = False

    def add(self, group, index: int, total: int) -> RecordingProgress:
        self.added.append((group.name, index, total))
        handle = RecordingProgress()
        self.handles.append(handle)
        return handle

    def wait(self) -> None:
        for handle in self.handles:
            handle.wait()
        self.waited = True
