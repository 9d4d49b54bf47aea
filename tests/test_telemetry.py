"""Tests for ffmpeg/ffprobe telemetry parsing."""
import io
from datetime import timedelta

import pytest

from gopro_join.engines.telemetry import (
    TelemetryEvent,
    first_match,
    fold_all,
    iter_telemetry,
    parse_duration_value,
    parse_out_time,
    probe_duration,
    track_progress,
)


def probe_stream(value: str) -> io.StringIO:
    return io.StringIO(f"duration={value}\nother_key_name={value}\n")


class TestIterTelemetry:
    """Tests for iter_telemetry."""

    def test_key_value(self):
        """Lines split on the first equals sign."""
        events = list(iter_telemetry(["a=1\n", "b=x=y\r\n"]))

        assert events == [TelemetryEvent("a", "1"), TelemetryEvent("b", "x=y")]

    def test_lines_without_separator_skipped(self):
        """Section markers and blank lines are ignored."""
        events = list(iter_telemetry(["[STREAM]\n", "\n", "index=0\n", "[/STREAM]\n"]))

        assert events == [TelemetryEvent("index", "0")]

    def test_lazy(self):
        """Events are produced one line at a time."""
        consumed = []

        def lines():
            for line in ["a=1\n", "b=2\n"]:
                consumed.append(line)
                yield line

        events = iter_telemetry(lines())
        next(events)

        assert consumed == ["a=1\n"]


class TestParseDurationValue:
    """Tests for SECONDS.FRACTION values."""

    @pytest.mark.parametrize("value, expected", [
        ("5.0", timedelta(seconds=5)),
        ("99.10", timedelta(seconds=99, microseconds=10)),
        ("100.10000", timedelta(seconds=100, microseconds=10000)),
        ("0000.0000", timedelta()),
        ("1111.", timedelta(seconds=1111)),
        (".1", timedelta(microseconds=1)),
        ("5.449002", timedelta(seconds=5, microseconds=449002)),
        ("N/A", timedelta()),
    ])
    def test_parse(self, value, expected):
        """Fractions are a literal microsecond count."""
        assert parse_duration_value(value) == expected


class TestParseOutTime:
    """Tests for H:MM:SS.FRACTION values."""

    @pytest.mark.parametrize("value, expected", [
        ("00:06:49.00", timedelta(minutes=6, seconds=49)),
        ("00:06:49.100", timedelta(minutes=6, seconds=49, microseconds=100)),
        ("01:06:49.100", timedelta(hours=1, minutes=6, seconds=49, microseconds=100)),
        ("02:06:49.100", timedelta(hours=2, minutes=6, seconds=49, microseconds=100)),
        ("00:00:00.000", timedelta()),
        ("000:0000:0.000000", timedelta()),
        ("2:0:0.0", timedelta(hours=2)),
        ("0:01", timedelta(minutes=1)),
    ])
    def test_parse(self, value, expected):
        """Each field is read as an integer."""
        assert parse_out_time(value) == expected

    def test_malformed_field_counts_as_zero(self):
        """ffmpeg's negative start time does not raise."""
        assert parse_out_time("-577014:32:22.77") == timedelta(
            minutes=32, seconds=22, microseconds=77
        )


class TestProbeDuration:
    """Tests for the first-match strategy."""

    @pytest.mark.parametrize("value, expected", [
        ("5.0", timedelta(seconds=5)),
        ("99.10", timedelta(seconds=99, microseconds=10)),
        ("100.10000", timedelta(seconds=100, microseconds=10000)),
        ("0000.0000", timedelta()),
        ("1111.", timedelta(seconds=1111)),
        (".1", timedelta(microseconds=1)),
    ])
    def test_probe_stream(self, value, expected):
        """The duration line of an ffprobe stream is found."""
        assert probe_duration(probe_stream(value)) == expected

    def test_no_duration(self):
        """A stream without a duration is zero long."""
        assert probe_duration(io.StringIO("index=0\ncodec_name=h264\n")) == timedelta()

    def test_stops_at_first_match(self):
        """Lines after the first match are not read."""
        stream = io.StringIO("duration=1.0\nduration=2.0\nrest=x\n")

        assert probe_duration(stream) == timedelta(seconds=1)
        assert stream.readline() == "duration=2.0\n"

    def test_first_match_default(self):
        """The default is returned when the key never appears."""
        assert first_match(["a=1\n"], "b", int, -1) == -1


class TestTrackProgress:
    """Tests for the fold-all strategy."""

    def test_every_out_time(self):
        """Every out_time is reported in order."""
        lines = []
        for value in ["01:00:00.0", "2:0:0.0", "0:01:00.0", "0:01:01.100"]:
            lines.append(f"out_time={value}\n")
            lines.append(f"other_key_name={value}\n")
        updates = []

        track_progress(io.StringIO("".join(lines)), updates.append)

        assert updates == [
            timedelta(hours=1),
            timedelta(hours=2),
            timedelta(minutes=1),
            timedelta(minutes=1, seconds=1, microseconds=100),
        ]
        assert sum(updates, timedelta()) == timedelta(
            hours=3, minutes=2, seconds=1, microseconds=100
        )

    def test_reads_to_end(self):
        """The whole stream is consumed."""
        stream = io.StringIO("out_time=0:0:1.0\nprogress=end\n")

        fold_all(stream, "out_time", lambda value: None)

        assert stream.read() == ""

    def test_other_keys_ignored(self):
        """Keys that only contain out_time do not match."""
        updates = []

        track_progress(["out_time_ms=1000000\n", "out_time_us=1000000\n"], updates.append)

        assert updates == []
