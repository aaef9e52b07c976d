"""File mode: walk every root under one shared result budget."""

from typing import Optional

from .filters import Mode
from .report import ScanSummary
from .scan import BaseScan


class Budget:
    """
    Remaining number of results a scan may still report.

    Shared by every root of one run and only ever decremented.
    """

    def __init__(self, limit: Optional[int] = None):
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.remaining = limit

    @property
    def unlimited(self) -> bool:
        return self.remaining is None

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0

    def consume(self) -> None:
        if self.exhausted:
            raise RuntimeError("Budget already exhausted")
        if self.remaining is not None:
            self.remaining -= 1


class BudgetedExplorer(BaseScan):
    """
    Report files accepted by the filter pipeline until the budget runs out.

    Roots are walked in the configured order. Once the budget is exhausted
    the current walker is abandoned and no further roots are started. The
    summary counts exactly what was reported.
    """

    mode = Mode.FILE

    async def explore(self) -> ScanSummary:
        """Walk the roots in order and report accepted files until the budget runs out."""
        budget = Budget(self.config.limit)
        found = 0
        total_size = 0

        for root in self.config.paths:
            if budget.exhausted:
                break

            walker = self.walker(root)
            async for entity in walker:
                if not self.pipeline.accept(entity):
                    continue

                self.sink.report_file(entity)
                found += 1
                total_size += entity.size
                budget.consume()

                if budget.exhausted:
                    self.logger.debug(f"Result limit reached in {walker.root}")
                    break

            self.merge_walker_stats(walker)

        self.update_stats(files_accepted=found)
        summary = ScanSummary(mode=Mode.FILE, found=found, total_size=total_size)
        self.sink.report_summary(summary)
        return summary

    async def run(self) -> ScanSummary:
        return await self.explore()
