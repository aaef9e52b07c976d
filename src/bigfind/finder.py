"""Run a complete scan: logging, mode dispatch and completion statistics."""

import time
from typing import Optional

import psutil

from . import __version__
from .aggregator import DirectoryAggregator
from .config import Config
from .explorer import BudgetedExplorer
from .filters import Mode
from .logging import log_with_context, setup_logging
from .report import ConsoleSink, ReportSink, ScanSummary


def get_memory_usage_mb() -> float:
    """Get current memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / 1024 / 1024


async def async_main(config: Config, sink: Optional[ReportSink] = None) -> ScanSummary:
    """
    Async entry point: scan the configured roots and report to ``sink``.

    Args:
        config: Resolved configuration
        sink: Where results go (console output by default)

    Returns:
        Summary of what was reported

    Raises:
        ValueError, FileNotFoundError, NotADirectoryError: On invalid configuration
    """
    logger = setup_logging("bigfind", config.log_level)
    if sink is None:
        sink = ConsoleSink(plumbing=config.plumbing)

    start_time = time.time()
    scan_class = BudgetedExplorer if config.mode is Mode.FILE else DirectoryAggregator
    scan = scan_class(config, sink, logger=logger)

    log_with_context(
        logger,
        "info",
        f"Starting scan - {config.mode.value.upper()} MODE",
        {
            "version": __version__,
            "paths": config.paths,
            "max_depth": config.max_depth,
            "min_size": config.min_size,
            "limit": config.limit,
            "pattern": config.pattern,
            "min_age": config.min_age,
            "max_age": config.max_age,
            "same_filesystem": config.same_filesystem,
        },
    )

    # Overlapping roots are walked twice and not de-duplicated
    for outer, inner in config.nested_roots():
        log_with_context(
            logger,
            "warning",
            "Configured roots overlap, entries below the inner root are scanned twice",
            {"outer": outer, "inner": inner},
        )

    summary = await scan.run()

    duration = time.time() - start_time
    final_stats = {
        "duration_seconds": round(duration, 2),
        "found": summary.found,
        "total_size": summary.total_size,
        **scan.stats,
        "memory_mb": round(get_memory_usage_mb(), 1),
    }
    log_with_context(logger, "info", "Scan completed", final_stats)

    return summary
