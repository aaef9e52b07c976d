"""Bounded depth-first walker over a single root directory."""

import asyncio
import logging
import os
from collections import deque
from typing import Optional

from .entity import (
    EntityNotFound,
    FsEntity,
    FsKind,
    MetadataUnavailable,
    resolve,
    resolve_canonical,
    resolve_root,
)
from .filters import is_excluded_path
from .logging import log_with_context


async def async_scandir(path: str) -> list:
    """Async wrapper for os.scandir."""
    loop = asyncio.get_running_loop()

    def _scandir():
        with os.scandir(path) as entries:
            return list(entries)

    return await loop.run_in_executor(None, _scandir)


class BoundedWalker:
    """
    Walk one root directory depth-first and yield the regular files found.

    The walker is an async iterator and can be consumed exactly once:

        async for entity in BoundedWalker(root, max_depth=2):
            ...

    Depth counts path components below the root. Files in the root itself
    are at depth 0, and sub-directories are only descended into while the
    current depth is below ``max_depth`` (``None`` means unlimited). Symlinks
    below the root are never followed (the root itself is fully resolved),
    pseudo-filesystem trees are never entered and, with
    ``same_filesystem``, entries on another device than the root are skipped.
    """

    def __init__(
        self,
        root,
        max_depth: Optional[int] = None,
        same_filesystem: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        self.root = resolve_root(root)
        self.max_depth = max_depth
        self.same_filesystem = same_filesystem
        self.logger = logger or logging.getLogger("bigfind")

        self.stats = {
            "dirs_scanned": 0,
            "files_scanned": 0,
            "symlinks_skipped": 0,
            "special_files_skipped": 0,
            "other_filesystem_skipped": 0,
            "excluded_skipped": 0,
            "errors": 0,
        }

        self._pending: deque[tuple[str, int]] = deque()
        self._files: deque[FsEntity] = deque()
        self._root_device: Optional[int] = None
        self._started = False
        self._exhausted = False

    def __aiter__(self) -> "BoundedWalker":
        return self

    async def __anext__(self) -> FsEntity:
        if not self._started:
            self._started = True
            await self._start()

        while not self._files:
            if self._exhausted or not self._pending:
                self._exhausted = True
                self._pending.clear()
                raise StopAsyncIteration
            directory, depth = self._pending.pop()
            await self._visit(directory, depth)

        return self._files.popleft()

    async def _start(self) -> None:
        if is_excluded_path(self.root):
            self.stats["excluded_skipped"] += 1
            log_with_context(
                self.logger,
                "info",
                "Skipping pseudo-filesystem root",
                {"root": self.root},
            )
            return

        try:
            root = await resolve(self.root)
        except OSError as e:
            self.stats["errors"] += 1
            log_with_context(
                self.logger,
                "warning",
                "Unable to read walk root",
                {"root": self.root},
                error=e,
            )
            return

        if not root.is_dir:
            self.stats["errors"] += 1
            log_with_context(
                self.logger,
                "warning",
                "Walk root is not a directory",
                {"root": self.root, "kind": root.kind.value},
            )
            return

        self._root_device = root.device
        self._pending.append((self.root, 0))

    async def _visit(self, directory: str, depth: int) -> None:
        """List one directory, queue its files and (depth permitting) its sub-directories."""
        self.stats["dirs_scanned"] += 1

        try:
            entries = await async_scandir(directory)
        except OSError as e:
            self.stats["errors"] += 1
            log_with_context(
                self.logger,
                "warning",
                "Unable to list directory, skipping subtree",
                {"directory": directory},
                error=e,
            )
            return

        subdirs = []
        for entry in entries:
            entity = await self._resolve_entry(entry)
            if entity is None:
                continue

            if entity.kind is FsKind.FILE:
                self.stats["files_scanned"] += 1
                self._files.append(entity)
            elif entity.kind is FsKind.DIRECTORY:
                subdirs.append(entity.path)

        if self.max_depth is None or depth < self.max_depth:
            # Reversed so the stack pops them in listing order
            for subdir in reversed(subdirs):
                self._pending.append((subdir, depth + 1))

    async def _resolve_entry(self, entry: os.DirEntry) -> Optional[FsEntity]:
        """Turn a directory entry into an entity, or None if it must be skipped."""
        path = entry.path

        try:
            entity = await resolve_canonical(path)
        except EntityNotFound:
            # Removed since the listing
            self.logger.debug(f"Entry vanished: {path}")
            return None
        except MetadataUnavailable as e:
            self.stats["errors"] += 1
            log_with_context(
                self.logger,
                "warning",
                "Unable to read metadata",
                {"path": path},
                error=e,
            )
            return None

        if entity.kind is FsKind.OTHER:
            if entry.is_symlink():
                self.stats["symlinks_skipped"] += 1
                self.logger.debug(f"Skipping symlink: {path}")
            else:
                self.stats["special_files_skipped"] += 1
                self.logger.debug(f"Skipping special file: {path}")
            return None

        if is_excluded_path(path):
            self.stats["excluded_skipped"] += 1
            self.logger.debug(f"Skipping pseudo-filesystem path: {path}")
            return None

        if self.same_filesystem and entity.device != self._root_device:
            self.stats["other_filesystem_skipped"] += 1
            self.logger.debug(f"Skipping entry on another filesystem: {path}")
            return None

        return entity
