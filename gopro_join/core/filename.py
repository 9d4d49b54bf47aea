"""Camera filename grammar.

``GH011234.mp4`` splits into encoding ``GH``, chapter ``01``, file ``1234``
and extension ``mp4``. Loop recordings carry an alphabetic chapter code
(``GHAA1234.mp4``).
"""
from __future__ import annotations

from .errors import InvalidChapterNumberZero, InvalidFileName, InvalidFileNumberZero
from .identifier import parse_encoding, parse_identifier
from .models import Fingerprint, Recording

STEM_LENGTH = 8


def parse_recording(name: str) -> Recording:
    """Parse one filename into a Recording.

    Raises:
        FileNameError: If the name does not follow the convention.
    """
    stem, dot, extension = name.rpartition(".")
    if not dot:
        raise InvalidFileName(name)
    if len(stem) != STEM_LENGTH:
        raise InvalidFileName(stem)

    encoding = parse_encoding(stem[0:2])

    file = parse_identifier(stem[4:8])
    if file.numeric == 0:
        raise InvalidFileNumberZero()

    chapter = parse_identifier(stem[2:4])
    if chapter.numeric == 0:
        raise InvalidChapterNumberZero()

    return Recording(
        fingerprint=Fingerprint(encoding=encoding, file=file, extension=extension),
        chapter=chapter,
    )

