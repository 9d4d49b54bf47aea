"""Join chaptered camera recordings into one file per recording.

Recordings split by the camera into chapter files (``GH011234.mp4``,
``GH021234.mp4``, ...) are grouped and concatenated losslessly with ffmpeg
into ``GH001234.mp4``.
"""

__version__ = "2.0.0"

# Core exports
from .core.config import JoinConfig, ReporterKind, Toolchain
from .core.errors import GoProJoinError, FileNameError, MergeError, ProcessingError
from .core.models import Fingerprint, RecordingGroup, MergeResult, ProcessingStats
from .core.protocols import Progress, Reporter, Merger

# Service exports
from .services.grouper import DirectoryScanner, discover_groups, group_recordings
from .services.merger import FFmpegMerger
from .services.processor import GroupProcessor, ProcessorDependencies

# Logging exports
from .logging import JsonProgressReporter, RichProgressReporter, create_reporter

__all__ = [
    # Core
    "JoinConfig",
    "ReporterKind",
    "Toolchain",
    "GoProJoinError",
    "FileNameError",
    "MergeError",
    "ProcessingError",
    "Fingerprint",
    "RecordingGroup",
    "MergeResult",
    "ProcessingStats",
    "Progress",
    "Reporter",
    "Merger",
    # Services
    "DirectoryScanner",
    "discover_groups",
    "group_recordings",
    "FFmpegMerger",
    "GroupProcessor",
    "ProcessorDependencies",
    # Logging
    "JsonProgressReporter",
    "RichProgressReporter",
    "create_reporter",
]
