"""Directory mode: roll file sizes up into every ancestor directory."""

import os
from pathlib import Path
from typing import Optional

from .entity import FsEntity
from .filters import Mode
from .report import ScanSummary
from .scan import BaseScan


class SizeAccumulator:
    """
    Total bytes per directory.

    ``sizes[d]`` is the sum of every added file below ``d``, for each ``d``
    between a file's parent and its walk root (inclusive). Directories
    without added files have no entry. Parent links are recorded once per
    directory and reused for every later file.
    """

    def __init__(self):
        self.sizes: dict[str, int] = {}
        self._parents: dict[str, Optional[str]] = {}

    def link(self, directory: str, parent: Optional[str]) -> None:
        self._parents[directory] = parent

    def knows(self, directory: str) -> bool:
        return directory in self._parents

    def parent_of(self, directory: str) -> Optional[str]:
        try:
            return self._parents[directory]
        except KeyError:
            parent = os.path.dirname(directory)
            if parent == directory:
                parent = None
            self._parents[directory] = parent
            return parent

    def add(self, directory: str, root: str, size: int) -> None:
        """
        Add ``size`` to ``directory`` and each ancestor up to and including ``root``.

        Both paths must be canonical. If ``root`` is never met, the walk stops
        at the filesystem root.
        """
        current: Optional[str] = directory
        while current is not None:
            self.sizes[current] = self.sizes.get(current, 0) + size
            if current == root:
                return
            current = self.parent_of(current)

    def __getitem__(self, directory: str) -> int:
        return self.sizes[directory]

    def __contains__(self, directory: str) -> bool:
        return directory in self.sizes

    def __len__(self) -> int:
        return len(self.sizes)


def _hierarchy_key(path: str) -> tuple:
    return Path(path).parts


class DirectoryAggregator(BaseScan):
    """
    Report the total size of directories.

    Every root is walked completely (totals are only known at the end),
    then the totals are filtered by ``min_size``, sorted by path and cut
    to ``limit`` entries. The summary total is the largest reported entry,
    which is the walk root's own total whenever the root is reported.
    """

    mode = Mode.DIRECTORY

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.accumulator = SizeAccumulator()

    async def collect(self) -> SizeAccumulator:
        """Walk every root and fill the accumulator."""
        for root in self.config.paths:
            walker = self.walker(root)
            accepted = 0
            async for entity in walker:
                if not self.pipeline.accept(entity):
                    continue
                parent = entity.parent_path
                if parent is None:
                    continue
                await self._link_ancestors(entity, walker.root)
                self.accumulator.add(parent, walker.root, entity.size)
                accepted += 1

            self.merge_walker_stats(walker)
            self.update_stats(files_accepted=accepted)

        return self.accumulator

    async def _link_ancestors(self, entity: FsEntity, root: str) -> None:
        """Resolve each directory between ``entity`` and ``root`` the first time it is seen."""
        current = entity
        while current.parent_path not in (None, root) and not self.accumulator.knows(current.parent_path):
            try:
                directory = await current.parent()
            except OSError as e:
                # add() falls back to the lexical parent
                self.logger.debug(f"Unable to resolve {current.parent_path}: {e}")
                return
            self.accumulator.link(directory.path, directory.parent_path)
            current = directory

    def select(self) -> list[tuple[str, int]]:
        """Apply the size threshold, ordering and limit to the collected totals."""
        selected = [
            (path, size) for path, size in self.accumulator.sizes.items() if size >= self.criteria.min_size
        ]
        selected.sort(key=lambda item: _hierarchy_key(item[0]))
        if self.config.limit is not None:
            selected = selected[: self.config.limit]
        return selected

    async def run(self) -> ScanSummary:
        return await self.aggregate()

    async def aggregate(self) -> ScanSummary:
        """Collect every root, then report the selected directories and the summary."""
        await self.collect()
        selected = self.select()

        for path, size in selected:
            self.sink.report_directory(path, size)

        total_size = max((size for _, size in selected), default=0)
        summary = ScanSummary(mode=Mode.DIRECTORY, found=len(selected), total_size=total_size)
        self.sink.report_summary(summary)
        return summary
