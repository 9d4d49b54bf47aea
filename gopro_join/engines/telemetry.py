"""Parsing of ``key=value`` telemetry emitted by ffmpeg and ffprobe.

Both tools write one pair per line while they run (``-progress pipe:1`` for
ffmpeg, ``-show_streams`` for ffprobe). Every strategy here is a view over
the same lazy event sequence:

- first match: ``duration=5.449002`` from ffprobe, stop at the first hit
- fold all: ``out_time=00:01:02.500000`` from ffmpeg, every hit until EOF

Fractions are taken literally as a microsecond count, so ``99.10`` is
99 seconds and 10 microseconds.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterable, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DURATION_KEY = "duration"
OUT_TIME_KEY = "out_time"


@dataclass(frozen=True, slots=True)
class TelemetryEvent:
    """One ``key=value`` line."""
    key: str
    value: str


def iter_telemetry(stream: Iterable[str]) -> Iterator[TelemetryEvent]:
    """Lazily yield events from a line stream.

    Lines without ``=`` are skipped. Only the first ``=`` splits.
    """
    for line in stream:
        line = line.rstrip("\r\n")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("telemetry line %s", line)

        key, sep, value = line.partition("=")
        if not sep:
            continue
        yield TelemetryEvent(key=key, value=value)


def scan_telemetry(
    stream: Iterable[str],
    callback: Callable[[str, str], Optional[T]],
    default: T,
) -> T:
    """Feed each event to ``callback``; return its first non-None result.

    Returns ``default`` when the stream ends without a result.
    """
    for event in iter_telemetry(stream):
        result = callback(event.key, event.value)
        if result is not None:
            return result
    return default


def first_match(
    stream: Iterable[str],
    key: str,
    parse: Callable[[str], T],
    default: T,
) -> T:
    """Parse the value of the first ``key`` line."""
    return scan_telemetry(
        stream,
        lambda name, value: parse(value) if name == key else None,
        default,
    )


def fold_all(
    stream: Iterable[str],
    key: str,
    on_value: Callable[[str], None],
) -> None:
    """Call ``on_value`` for every ``key`` line until the stream ends."""

    def _visit(name: str, value: str) -> None:
        if name == key:
            on_value(value)
        return None

    scan_telemetry(stream, _visit, None)


# ============ Value parsing ============

def _lenient_int(text: str) -> int:
    """Integer value of a field; malformed fields count as zero."""
    if text.isascii() and text.isdigit():
        return int(text)
    return 0


def parse_duration_value(value: str) -> timedelta:
    """Parse ``SECONDS.FRACTION``."""
    seconds, _, fraction = value.partition(".")
    return timedelta(
        seconds=_lenient_int(seconds),
        microseconds=_lenient_int(fraction.split(".")[0]),
    )


def parse_out_time(value: str) -> timedelta:
    """Parse ``H:MM:SS.FRACTION``; missing fields count as zero."""
    clock, _, fraction = value.partition(".")
    parts = clock.split(":")
    parts += ["0"] * (3 - len(parts))
    hours, minutes, seconds = (_lenient_int(part) for part in parts[:3])
    return timedelta(
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=_lenient_int(fraction.split(".")[0]),
    )


# ============ Strategies ============

def probe_duration(stream: Iterable[str]) -> timedelta:
    """Duration reported by ffprobe, zero if it never reports one."""
    return first_match(stream, DURATION_KEY, parse_duration_value, timedelta())


def track_progress(
    stream: Iterable[str],
    on_update: Callable[[timedelta], None],
) -> None:
    """Report every ``out_time`` ffmpeg emits until its output closes."""
    fold_all(stream, OUT_TIME_KEY, lambda value: on_update(parse_out_time(value)))
