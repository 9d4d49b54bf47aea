"""Tests for filename parsing."""
import pytest

from gopro_join.core.errors import (
    FileNameError,
    InvalidChapterNumberZero,
    InvalidEncoding,
    InvalidFileName,
    InvalidFileNumberZero,
)
from gopro_join.core.filename import parse_recording
from gopro_join.core.identifier import Encoding, IdentifierKind, parse_identifier
from gopro_join.core.models import Fingerprint, Recording


class TestParseRecording:
    """Tests for parse_recording."""

    @pytest.mark.parametrize("name, expected", [
        (
            "GH010034.mp4",
            Recording(
                fingerprint=Fingerprint(Encoding.AVC, parse_identifier("0034"), "mp4"),
                chapter=parse_identifier("01"),
            ),
        ),
        (
            "GX111134.flv",
            Recording(
                fingerprint=Fingerprint(Encoding.HEVC, parse_identifier("1134"), "flv"),
                chapter=parse_identifier("11"),
            ),
        ),
    ])
    def test_valid(self, name, expected):
        """Valid names parse and render back unchanged."""
        parsed = parse_recording(name)

        assert parsed == expected
        assert str(parsed) == name

    def test_loop_chapter(self):
        """Alphabetic chapter codes are loop recordings."""
        parsed = parse_recording("GHAA1234.MP4")

        assert parsed.chapter.kind is IdentifierKind.LOOP
        assert parsed.fingerprint.extension == "MP4"
        assert str(parsed) == "GHAA1234.MP4"

    def test_extension_after_last_dot(self):
        """Only the last dot separates the extension."""
        with pytest.raises(InvalidFileName) as exc_info:
            parse_recording("GH01.1234.mp4")

        assert exc_info.value.name == "GH01.1234"

    @pytest.mark.parametrize("name", [
        "invalid_dots_amount..",
        "name_longer_than_8_chars_.mp4",
        "picture.png",
        "0",
        "",
        "1111111111111111",
        "GY111134.flv",
        "GPAA0000.mp4",
        "GX000000.mp4",
        "GH010000.mp4",
        "GH000001.mp4",
    ])
    def test_invalid(self, name):
        """Names outside the convention raise FileNameError."""
        with pytest.raises(FileNameError):
            parse_recording(name)

    def test_no_dot(self):
        """A name without an extension is reported whole."""
        with pytest.raises(InvalidFileName) as exc_info:
            parse_recording("GH011234")

        assert exc_info.value.name == "GH011234"

    def test_wrong_encoding(self):
        """Unknown prefixes report the two-letter code."""
        with pytest.raises(InvalidEncoding) as exc_info:
            parse_recording("GY111134.flv")

        assert exc_info.value.prefix == "GY"

    def test_file_number_zero(self):
        """File number 0000 is rejected before the chapter is checked."""
        with pytest.raises(InvalidFileNumberZero):
            parse_recording("GX000000.mp4")

    def test_chapter_number_zero(self):
        """Chapter 00 is reserved for merged output."""
        with pytest.raises(InvalidChapterNumberZero):
            parse_recording("GH000001.mp4")


class TestFingerprint:
    """Tests for Fingerprint."""

    def test_same_recording_same_fingerprint(self):
        """Chapters of one recording share a fingerprint."""
        first = parse_recording("GH011234.mp4")
        second = parse_recording("GH021234.mp4")

        assert first.fingerprint == second.fingerprint
        assert hash(first.fingerprint) == hash(second.fingerprint)

    @pytest.mark.parametrize("other", ["GX011234.mp4", "GH011235.mp4", "GH011234.MP4"])
    def test_fingerprint_differs(self, other):
        """Encoding, file number and extension all distinguish recordings."""
        assert parse_recording("GH011234.mp4").fingerprint != parse_recording(other).fingerprint

    def test_file_name(self):
        """Fingerprint renders a file name for any chapter code."""
        fingerprint = parse_recording("GX031234.mp4").fingerprint

        assert fingerprint.file_name("00") == "GX001234.mp4"
