"""Log handler setup for the command line tool."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "GOPRO_JOIN_LOG"
DEFAULT_LEVEL = logging.WARNING


def resolve_level(verbose: bool = False) -> int:
    """DEBUG when verbose, else the level named by GOPRO_JOIN_LOG, else WARNING."""
    if verbose:
        return logging.DEBUG

    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return DEFAULT_LEVEL
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else DEFAULT_LEVEL


def configure_logging(
    verbose: bool = False,
    json_mode: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Install the root handler.

    In JSON mode logs go to stderr as plain text so stdout stays a clean
    JSON-lines stream. Otherwise they go through Rich on the reporter's
    console so they print above the live progress bars.
    """
    level = resolve_level(verbose)

    if json_mode:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=verbose,
            rich_tracebacks=verbose,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(level=level, handlers=[handler], force=True)
