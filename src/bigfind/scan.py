"""Shared plumbing for the file and directory scans."""

import logging
import time
from typing import Callable, Optional

from .config import Config
from .filters import FilterPipeline, Mode
from .report import ReportSink
from .walker import BoundedWalker


class BaseScan:
    """
    Validate the configuration, build the filter pipeline and keep walk counters.

    Subclasses set ``mode`` and implement ``run()``, which drives the whole scan
    and returns its ScanSummary.
    """

    mode: Mode

    def __init__(
        self,
        config: Config,
        sink: ReportSink,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.time,
    ):
        if config.mode is not self.mode:
            raise ValueError(f"{type(self).__name__} requires mode {self.mode.value}, got {config.mode.value}")

        # Invalid criteria must fail here, before any traversal
        self.criteria = config.validate()
        self.config = config
        self.sink = sink
        self.logger = logger or logging.getLogger("bigfind")
        self.pipeline = FilterPipeline(self.criteria, logger=self.logger, clock=clock)

        self.stats = {
            "roots_scanned": 0,
            "dirs_scanned": 0,
            "files_scanned": 0,
            "files_accepted": 0,
            "symlinks_skipped": 0,
            "special_files_skipped": 0,
            "other_filesystem_skipped": 0,
            "excluded_skipped": 0,
            "errors": 0,
        }

    def walker(self, root: str) -> BoundedWalker:
        return BoundedWalker(
            root,
            max_depth=self.config.max_depth,
            same_filesystem=self.criteria.same_filesystem,
            logger=self.logger,
        )

    def update_stats(self, **kwargs) -> None:
        for key, value in kwargs.items():
            if key in self.stats:
                self.stats[key] += value

    def merge_walker_stats(self, walker: BoundedWalker) -> None:
        self.update_stats(roots_scanned=1, **walker.stats)
