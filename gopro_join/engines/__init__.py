"""External tool engines: ffmpeg/ffprobe processes and their telemetry."""
from .ffmpeg import FFmpegCommand, MergeCommand, ProbeCommand, build_args, build_argv
from .telemetry import iter_telemetry, probe_duration, track_progress

__all__ = [
    "FFmpegCommand",
    "MergeCommand",
    "ProbeCommand",
    "build_args",
    "build_argv",
    "iter_telemetry",
    "probe_duration",
    "track_progress",
]
