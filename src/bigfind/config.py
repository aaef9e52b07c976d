"""Resolved run configuration."""

import os
from dataclasses import dataclass, field
from typing import Optional

from .entity import resolve_root
from .filters import FilterCriteria, Mode

DEFAULT_MIN_SIZE = 100 * 1024 * 1024


@dataclass
class Config:
    """
    Everything one run needs, as built by the command line layer.

    Attributes:
        paths: Walk roots, processed in this order
        max_depth: Maximum depth below each root (None = unlimited)
        min_size: Minimum size in bytes
        limit: Maximum number of results (None = unlimited)
        pattern: Regular expression matched against file names
        min_age: Only entries modified at least this many seconds ago
        max_age: Only entries modified at most this many seconds ago
        same_filesystem: Do not cross mount points
        mode: FILE lists files, DIRECTORY lists directory totals
        plumbing: Machine readable output
        log_level: Logging level name
    """

    paths: list = field(default_factory=lambda: ["."])
    max_depth: Optional[int] = None
    min_size: int = DEFAULT_MIN_SIZE
    limit: Optional[int] = None
    pattern: Optional[str] = None
    min_age: Optional[float] = None
    max_age: Optional[float] = None
    same_filesystem: bool = False
    mode: Mode = Mode.FILE
    plumbing: bool = False
    log_level: str = "WARNING"

    def validate(self) -> FilterCriteria:
        """
        Check the configuration and build the filter criteria.

        Returns:
            FilterCriteria for this run

        Raises:
            ValueError: If a numeric bound or the pattern is invalid
            FileNotFoundError: If a root does not exist
            NotADirectoryError: If a root is not a directory
        """
        if not self.paths:
            raise ValueError("At least one path is required")

        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

        if self.limit is not None and self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")

        for path in self.paths:
            if not os.path.exists(path):
                raise FileNotFoundError(f"Path does not exist: {path}")
            if not os.path.isdir(path):
                raise NotADirectoryError(f"Path is not a directory: {path}")

        return FilterCriteria(
            min_size=self.min_size,
            pattern=self.pattern,
            min_age=self.min_age,
            max_age=self.max_age,
            same_filesystem=self.same_filesystem,
            mode=self.mode,
        )

    def nested_roots(self) -> list[tuple[str, str]]:
        """Return (ancestor, descendant) pairs of configured roots that overlap."""
        roots = [resolve_root(p) for p in self.paths]
        pairs = []
        for i, outer in enumerate(roots):
            for j, inner in enumerate(roots):
                if i == j:
                    continue
                if inner == outer and i < j:
                    pairs.append((outer, inner))
                elif inner != outer and inner.startswith(outer.rstrip(os.sep) + os.sep):
                    pairs.append((outer, inner))
        return pairs
