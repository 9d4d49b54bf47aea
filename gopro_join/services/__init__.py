"""Service layer - grouping, merging and scheduling."""
from .grouper import DirectoryScanner, discover_groups, group_recordings
from .merger import FFmpegMerger, MergeState, calculate_total_duration
from .processor import GroupProcessor, ProcessorDependencies

__all__ = [
    "DirectoryScanner",
    "discover_groups",
    "group_recordings",
    "FFmpegMerger",
    "MergeState",
    "calculate_total_duration",
    "GroupProcessor",
    "ProcessorDependencies",
]
