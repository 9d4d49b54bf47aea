"""Exception hierarchy.

Filename errors are recoverable: the grouper logs them and skips the file.
Merge errors abort only the group that raised them.
"""
from __future__ import annotations

from typing import Optional, Sequence

NAMING_CONVENTION_URL = (
    "https://community.gopro.com/t5/en/GoPro-Camera-File-Naming-Convention/ta-p/390220"
)


class GoProJoinError(Exception):
    """Base class for all errors raised by gopro_join."""


# ============ Filename grammar ============

class FileNameError(GoProJoinError):
    """A filename does not follow the camera naming convention."""


class InvalidIdentifierLength(FileNameError):
    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"Invalid identifier length {length}. Identifiers are 2 (chapter) "
            f"or 4 (file) characters long"
        )


class InvalidEncoding(FileNameError):
    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(
            f"Invalid encoding for file {prefix}. Supported encodings are "
            f"AVC(GH), HEVC(GX): {NAMING_CONVENTION_URL}"
        )


class InvalidFileName(FileNameError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid file name {name}. Valid file name formats can be found "
            f"here: {NAMING_CONVENTION_URL}"
        )


class InvalidFileNumberZero(FileNameError):
    def __init__(self) -> None:
        super().__init__(
            "Invalid recording file number 0. Non loop file numbers should be "
            "numeric in the range of 0001-9999"
        )


class InvalidChapterNumberZero(FileNameError):
    def __init__(self) -> None:
        super().__init__(
            "Invalid recording chapter number 0. Non loop chapter numbers should "
            "be numeric in the range of 01-99"
        )


# ============ Merge pipeline ============

class MergeError(GoProJoinError):
    """A group could not be merged."""


class CommandNotSpawned(MergeError):
    def __init__(self, program: str):
        self.program = program
        super().__init__(f"Command not spawned {program}")


class NoStdout(MergeError):
    def __init__(self, program: str):
        self.program = program
        super().__init__(f"Cannot get stdout stream for command {program}")


class FailedToConvert(MergeError):
    def __init__(self, file: str, exit_status: Optional[int]):
        self.file = file
        self.exit_status = exit_status
        super().__init__(f"Failed to convert movie {file}, exit status {exit_status}")


class FailedToGetInfo(MergeError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Failed to get ffmpeg info {path}")


# ============ Processor ============

class ProcessingError(GoProJoinError):
    """One or more groups failed to merge.

    ``failures`` keeps (group name, exception) pairs in group order; the
    message leads with the first one.
    """

    def __init__(self, failures: Sequence[tuple[str, BaseException]]):
        self.failures = list(failures)
        first_name, first_error = self.failures[0]
        message = f"{first_name}: {first_error}"
        if len(self.failures) > 1:
            message += f" (and {len(self.failures) - 1} more failed groups)"
        super().__init__(message)

    @property
    def first(self) -> BaseException:
        return self.failures[0][1]
