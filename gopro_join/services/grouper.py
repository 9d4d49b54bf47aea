"""Discovery of multi-chapter recordings.

Grouping is best-effort: names that do not follow the camera convention are
logged and skipped, never treated as fatal.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..core.errors import FileNameError
from ..core.filename import parse_recording
from ..core.identifier import Identifier
from ..core.models import Fingerprint, Recording, RecordingGroup

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Lists candidate file names in a single directory (not recursive)."""

    def __init__(self, follow_symlinks: bool = True):
        """Initialize the scanner.

        Args:
            follow_symlinks: Whether symlinked files are listed.
        """
        self._follow_symlinks = follow_symlinks

    def scan(self, directory: Path) -> Iterator[str]:
        """Yield the name of every regular file in ``directory``."""
        for entry in directory.iterdir():
            if entry.is_symlink() and not self._follow_symlinks:
                continue
            if entry.is_file():
                yield entry.name


def parse_recordings(names: Iterable[str]) -> Iterator[Recording]:
    """Parse names, skipping the ones that are not recordings."""
    for name in names:
        try:
            yield parse_recording(name)
        except FileNameError as e:
            logger.info("Skipping %s: %s", name, e)


def group_recordings(names: Iterable[str]) -> list[RecordingGroup]:
    """Fold file names into groups keyed by fingerprint.

    Duplicate chapter codes are kept. Chapters are sorted within each group
    and groups are sorted by file identifier so indexes are stable between
    runs.
    """
    chapters: dict[Fingerprint, list[Identifier]] = defaultdict(list)
    for recording in parse_recordings(names):
        chapters[recording.fingerprint].append(recording.chapter)

    groups = [
        RecordingGroup(fingerprint=fingerprint, chapters=tuple(sorted(ids)))
        for fingerprint, ids in chapters.items()
    ]
    groups.sort(key=lambda group: group.fingerprint)

    logger.debug("Found %d groups", len(groups))
    return groups


def discover_groups(
    directory: Path,
    scanner: Optional[DirectoryScanner] = None,
) -> list[RecordingGroup]:
    """Enumerate ``directory`` once and group the recordings found."""
    scanner = scanner or DirectoryScanner()
    return group_recordings(scanner.scan(directory))
