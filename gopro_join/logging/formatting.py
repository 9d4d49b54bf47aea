"""Shared formatting for progress output."""
from __future__ import annotations

from datetime import timedelta
from typing import Optional


def format_duration(duration: Optional[timedelta]) -> str:
    """``HH:MM:SS``, or ``Unknown`` before the length is known."""
    if duration is None:
        return "Unknown"
    total = max(int(duration.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def percentage(elapsed: timedelta, length: Optional[timedelta]) -> int:
    """Whole percent of ``length`` covered by ``elapsed``, clamped to 0-100."""
    if not length or length <= timedelta():
        return 0
    value = round(elapsed / length * 100)
    return min(max(value, 0), 100)
