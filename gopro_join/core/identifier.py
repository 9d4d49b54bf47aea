"""Fixed-format codes embedded in camera filenames."""
from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidEncoding, InvalidIdentifierLength


class IdentifierKind(Enum):
    """What an identifier names, derived from its length."""
    FILE = "file"          # 4 chars: 0001-9999
    CHAPTER = "chapter"    # 2 chars, numeric: 01-99
    LOOP = "loop"          # 2 chars, alphabetic: AA-ZZ

    @property
    def width(self) -> Optional[int]:
        """Zero-padding width of the canonical form (loops are never padded)."""
        if self is IdentifierKind.FILE:
            return 4
        if self is IdentifierKind.CHAPTER:
            return 2
        return None


def _is_numeric(value: str) -> bool:
    return value.isascii() and value.isdigit()


@functools.total_ordering
@dataclass(frozen=True, slots=True)
class Identifier:
    """A file, chapter or loop code.

    Ordering compares numerically when both sides are numeric and by
    canonical string otherwise. Values are left-padded to a common width
    before comparing so that file and chapter codes still form a strict
    total order when mixed.
    """
    value: str
    kind: IdentifierKind

    @property
    def numeric(self) -> Optional[int]:
        """Integer value, or None for non-numeric (loop) codes."""
        if _is_numeric(self.value):
            return int(self.value)
        return None

    @property
    def _sort_key(self) -> tuple[str, int]:
        return self.value.rjust(4, "0"), len(self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self._sort_key < other._sort_key

    def __str__(self) -> str:
        width = self.kind.width
        return self.value.zfill(width) if width else self.value


def parse_identifier(value: str) -> Identifier:
    """Parse a 2 or 4 character code.

    Raises:
        InvalidIdentifierLength: For any other length.
    """
    if len(value) == 4:
        kind = IdentifierKind.FILE
    elif len(value) == 2:
        kind = IdentifierKind.CHAPTER if _is_numeric(value) else IdentifierKind.LOOP
    else:
        raise InvalidIdentifierLength(len(value))
    return Identifier(value=value, kind=kind)


class Encoding(Enum):
    """Video encoding, named by the two-letter filename prefix."""
    AVC = "GH"
    HEVC = "GX"

    @property
    def prefix(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


def parse_encoding(code: str) -> Encoding:
    """Match the encoding prefix at the start of ``code``.

    Raises:
        InvalidEncoding: If ``code`` starts with neither ``GH`` nor ``GX``.
    """
    for encoding in Encoding:
        if code.startswith(encoding.prefix):
            return encoding
    raise InvalidEncoding(code)
