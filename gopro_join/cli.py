"""Command line entry point."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core.config import JoinConfig, ReporterKind, Toolchain, default_workers
from .core.errors import ProcessingError
from .logging import AnyReporter, configure_logging, create_reporter
from .logging.rich_logger import RichProgressReporter
from .services.grouper import discover_groups
from .services.processor import GroupProcessor, ProcessorDependencies

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gopro-join",
        description="Join chaptered camera recordings into one file per recording.",
    )

    # Input/Output
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=None,
        help="Directory with the recordings (default: current directory)",
    )
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=None,
        help="Directory for merged files (default: INPUT)",
    )

    # Performance
    parser.add_argument(
        "-t", "-j", "--threads",
        dest="threads",
        type=int,
        default=None,
        help="Number of groups merged in parallel (default: CPU count)",
    )

    # Reporting
    parser.add_argument(
        "--json",
        action="store_true",
        help="Report progress as JSON lines instead of progress bars",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    # External tools
    parser.add_argument(
        "--ffmpeg",
        type=str,
        default=None,
        help="Path to the ffmpeg binary (default: ffmpeg on PATH)",
    )
    parser.add_argument(
        "--ffprobe",
        type=str,
        default=None,
        help="Path to the ffprobe binary (default: ffprobe on PATH)",
    )
    parser.add_argument(
        "--ffmpeg-log-dir",
        type=Path,
        default=None,
        help="Write each merge's ffmpeg stderr to DIR/<name>.log",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the groups that would be merged without merging",
    )

    return parser


def build_config(args: argparse.Namespace) -> JoinConfig:
    """Turn parsed arguments into a validated config."""
    input_dir = (args.input or Path.cwd()).expanduser().resolve()
    output_dir = args.output.expanduser().resolve() if args.output else None

    return JoinConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        workers=args.threads if args.threads is not None else default_workers(),
        reporter=ReporterKind.JSON if args.json else ReporterKind.TERMINAL,
        verbose=args.verbose,
        toolchain=Toolchain.from_paths(ffmpeg=args.ffmpeg, ffprobe=args.ffprobe),
        ffmpeg_log_dir=args.ffmpeg_log_dir,
        dry_run=args.dry_run,
    )


def run(config: JoinConfig, reporter: AnyReporter) -> int:
    """Discover and merge recordings. Returns the exit code."""
    groups = discover_groups(config.input_dir)
    if not groups:
        reporter.info(f"No recordings found in {config.input_dir}")
        return 0

    if config.dry_run:
        reporter.print_groups(groups)
        return 0

    processor = GroupProcessor(
        config=config,
        groups=groups,
        deps=ProcessorDependencies(reporter=reporter),
    )
    try:
        processor.process()
    except ProcessingError as e:
        for name, error in e.failures:
            reporter.error(f"{name}: {error}")
        return 1
    finally:
        reporter.print_stats(processor.stats)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    kind = ReporterKind.JSON if args.json else ReporterKind.TERMINAL
    reporter = create_reporter(kind)
    configure_logging(
        verbose=args.verbose,
        json_mode=kind is ReporterKind.JSON,
        console=reporter.console if isinstance(reporter, RichProgressReporter) else None,
    )

    try:
        config = build_config(args)
    except (ValueError, OSError) as e:
        reporter.error(f"Error: {e}")
        return 1

    try:
        return run(config, reporter)
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return 130
    except Exception as e:
        reporter.error(f"Error: {e}")
        if args.verbose:
            logger.exception("Unhandled error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
