"""Domain models - immutable data classes."""
from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .identifier import Encoding, Identifier

# Chapter code used in the name of a merged recording.
MERGED_CHAPTER = "00"


@functools.total_ordering
@dataclass(frozen=True, slots=True)
class Fingerprint:
    """Identity of one logical multi-chapter recording."""
    encoding: Encoding
    file: Identifier
    extension: str

    def file_name(self, chapter: str) -> str:
        return f"{self.encoding.prefix}{chapter}{self.file}.{self.extension}"

    @property
    def _sort_key(self) -> tuple[Identifier, str, str]:
        return self.file, self.encoding.prefix, self.extension

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return self._sort_key < other._sort_key


@dataclass(frozen=True, slots=True)
class Recording:
    """One parsed chapter file. Consumed by the grouper, never retained."""
    fingerprint: Fingerprint
    chapter: Identifier

    def __str__(self) -> str:
        return self.fingerprint.file_name(str(self.chapter))


@dataclass(frozen=True, slots=True)
class RecordingGroup:
    """A fingerprint and its chapters, sorted ascending.

    The unit of work for one merge.
    """
    fingerprint: Fingerprint
    chapters: tuple[Identifier, ...]

    def __post_init__(self) -> None:
        if not self.chapters:
            raise ValueError(f"Group {self.name} has no chapters")
        # Chapter order is the byte order of the merged output
        object.__setattr__(self, "chapters", tuple(sorted(self.chapters)))

    @property
    def name(self) -> str:
        """File name of the merged output, e.g. ``GH001234.mp4``."""
        return self.fingerprint.file_name(MERGED_CHAPTER)

    def chapter_file_name(self, chapter: Identifier) -> str:
        return self.fingerprint.file_name(str(chapter))

    def chapter_paths(self, directory: Path) -> list[Path]:
        """Absolute source paths, in chapter order."""
        return [
            (directory / self.chapter_file_name(chapter)).absolute()
            for chapter in self.chapters
        ]

    def output_path(self, directory: Path) -> Path:
        return directory / self.name


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of merging one group."""
    group: RecordingGroup
    output_path: Optional[Path] = None
    error: Optional[BaseException] = None

    @property
    def is_success(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ProcessingStats:
    """Mutable statistics for a run."""
    total_groups: int = 0
    merged: int = 0
    failed: int = 0
    elapsed_seconds: float = 0.0

    def record(self, result: MergeResult) -> None:
        """Record a merge result."""
        if result.is_success:
            self.merged += 1
        else:
            self.failed += 1

    def summary(self) -> dict[str, int]:
        return {
            "total": self.total_groups,
            "merged": self.merged,
            "failed": self.failed,
        }
