"""Main processor - runs every group's merge and the reporter together."""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..core.config import JoinConfig
from ..core.errors import ProcessingError
from ..core.models import MergeResult, ProcessingStats, RecordingGroup
from ..core.protocols import Merger, Progress, Reporter
from .merger import FFmpegMerger

logger = logging.getLogger(__name__)

MergerFactory = Callable[[Progress, RecordingGroup], Merger]


@dataclass
class ProcessorDependencies:
    """All dependencies needed by the processor.

    This is explicitly passed in - no globals or singletons.
    """
    reporter: Reporter
    merger_factory: Optional[MergerFactory] = None


class GroupProcessor:
    """Merges all groups over a bounded worker pool.

    A single extra thread runs ``reporter.wait()`` so progress output keeps
    advancing while workers run. ``process()`` returns only after the pool
    and the reporter have both finished.

    Every group is attempted; one group failing does not cancel the others.
    All failures are collected and raised together as ProcessingError.
    """

    def __init__(
        self,
        config: JoinConfig,
        groups: Sequence[RecordingGroup],
        deps: ProcessorDependencies,
    ):
        """Initialize processor with config and dependencies.

        Args:
            config: Run configuration.
            groups: Groups to merge.
            deps: All required dependencies.
        """
        self._config = config
        self._groups = sorted(groups, key=lambda group: group.fingerprint)
        self._deps = deps
        self._merger_factory = deps.merger_factory or self._create_merger
        self._stats = ProcessingStats(total_groups=len(self._groups))
        self._results: list[MergeResult] = []

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def results(self) -> list[MergeResult]:
        return list(self._results)

    def process(self) -> ProcessingStats:
        """Merge every group.

        Returns:
            Statistics about the run.

        Raises:
            ProcessingError: If any group failed, after all groups finished.
        """
        started = time.monotonic()
        reporter = self._deps.reporter

        # Handles exist before any work starts
        total = len(self._groups)
        work = [
            (reporter.add(group, index, total), group)
            for index, group in enumerate(self._groups)
        ]

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="reporter") as waiter:
            reporter_done = waiter.submit(reporter.wait)

            with ThreadPoolExecutor(
                max_workers=self._config.workers,
                thread_name_prefix="merge",
            ) as pool:
                futures = [pool.submit(self._merge_one, progress, group) for progress, group in work]

            self._results = [future.result() for future in futures]
            reporter_done.result()

        for result in self._results:
            self._stats.record(result)
        self._stats.elapsed_seconds = time.monotonic() - started

        failures = [
            (result.group.name, result.error)
            for result in self._results
            if result.error is not None
        ]
        if failures:
            raise ProcessingError(failures)
        return self._stats

    def _merge_one(self, progress: Progress, group: RecordingGroup) -> MergeResult:
        """Merge one group, containing any failure to that group."""
        try:
            merger = self._merger_factory(progress, group)
        except Exception as e:
            # The merger never ran, so the handle is still open
            progress.finish(str(e) or type(e).__name__)
            logger.error("Cannot merge %s: %s", group.name, e)
            return MergeResult(group=group, error=e)

        try:
            output = merger.merge()
        except Exception as e:
            logger.error("Failed to merge %s: %s", group.name, e)
            return MergeResult(group=group, error=e)

        logger.info("Merged %s", output)
        return MergeResult(group=group, output_path=output)

    def _create_merger(self, progress: Progress, group: RecordingGroup) -> Merger:
        return FFmpegMerger(
            progress,
            group,
            movies_path=self._config.input_dir,
            merged_output_path=self._config.resolved_output_dir,
            toolchain=self._config.toolchain,
            ffmpeg_log_dir=self._config.ffmpeg_log_dir,
        )
