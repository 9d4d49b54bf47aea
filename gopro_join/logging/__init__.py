"""Progress reporting and log setup."""
from __future__ import annotations

from typing import Optional, TextIO, Union

from rich.console import Console

from ..core.config import ReporterKind
from .json_reporter import JsonProgressReporter
from .rich_logger import RichProgressReporter
from .setup import configure_logging

# Both reporters implement the Reporter protocol plus the console messages
AnyReporter = Union[RichProgressReporter, JsonProgressReporter]


def create_reporter(
    kind: ReporterKind,
    console: Optional[Console] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> AnyReporter:
    """Build the reporter selected on the command line."""
    if kind is ReporterKind.JSON:
        return JsonProgressReporter(out=out, err=err)
    return RichProgressReporter(console=console)


__all__ = [
    "AnyReporter",
    "JsonProgressReporter",
    "RichProgressReporter",
    "configure_logging",
    "create_reporter",
]
