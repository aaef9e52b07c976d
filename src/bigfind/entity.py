"""Filesystem entities with metadata resolved once at construction."""

import enum
import os
import stat as statmod
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles.os


class EntityNotFound(FileNotFoundError):
    """The path did not exist when it was resolved."""


class MetadataUnavailable(OSError):
    """The OS refused to report metadata for an existing path."""


class FsKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


def canonicalize(path) -> str:
    """
    Return an absolute, canonical form of ``path``.

    The containing directory is fully resolved, but the final component is
    kept as-is so a symlink is never dereferenced.
    """
    absolute = Path(os.path.abspath(path))
    if not absolute.name:
        # Filesystem root
        return str(absolute)
    return str(absolute.parent.resolve() / absolute.name)


def resolve_root(path) -> str:
    """
    Return the fully resolved form of a walk root.

    Unlike ``canonicalize``, the final component is dereferenced too: a root
    given as a symlink is walked under its target's path, so every path
    produced below it is canonical.
    """
    return str(Path(os.path.abspath(path)).resolve())


def _kind_of(mode: int) -> FsKind:
    if statmod.S_ISREG(mode):
        return FsKind.FILE
    if statmod.S_ISDIR(mode):
        return FsKind.DIRECTORY
    return FsKind.OTHER


def _mod_time_of(st: os.stat_result) -> float:
    mod_time = getattr(st, "st_mtime", None)
    if mod_time is None:
        mod_time = getattr(st, "st_birthtime", None)
    if mod_time is None:
        return 0.0
    return float(mod_time)


@dataclass(frozen=True, order=True)
class FsEntity:
    """
    A single filesystem node.

    Equality, hashing and ordering use ``path`` only.
    """

    path: str
    size: int = field(default=0, compare=False)
    kind: FsKind = field(default=FsKind.OTHER, compare=False)
    mod_time: float = field(default=0.0, compare=False)
    device: int = field(default=0, compare=False)

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "FsEntity":
        """Build an entity from an lstat() result; ``path`` must already be canonical."""
        kind = _kind_of(st.st_mode)
        return cls(
            path=path,
            size=st.st_size if kind is FsKind.FILE else 0,
            kind=kind,
            mod_time=_mod_time_of(st),
            device=st.st_dev,
        )

    @property
    def name(self) -> str | None:
        return os.path.basename(self.path) or None

    @property
    def parent_path(self) -> str | None:
        parent = os.path.dirname(self.path)
        if parent == self.path:
            return None
        return parent

    @property
    def is_file(self) -> bool:
        return self.kind is FsKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is FsKind.DIRECTORY

    async def parent(self) -> "FsEntity | None":
        """Resolve the immediate containing directory, or None at the filesystem root."""
        parent = self.parent_path
        if parent is None:
            return None
        # The parent of a canonical path is canonical already
        return await resolve_canonical(parent)

    def __str__(self) -> str:
        return f"{self.kind.name}: {self.path}"


async def resolve(path) -> FsEntity:
    """
    Resolve ``path`` into an FsEntity.

    Args:
        path: Absolute or relative path

    Returns:
        Entity with cached metadata

    Raises:
        EntityNotFound: If the path does not exist
        MetadataUnavailable: If metadata cannot be read
    """
    return await resolve_canonical(canonicalize(path))


async def resolve_canonical(path: str) -> FsEntity:
    """Like ``resolve``, for a path that is already canonical (e.g. built from a listing)."""
    try:
        st = await aiofiles.os.stat(path, follow_symlinks=False)
    except FileNotFoundError as e:
        raise EntityNotFound(e.errno, "Entity does not exist", path) from e
    except OSError as e:
        raise MetadataUnavailable(e.errno, f"Unable to read metadata: {e.strerror}", path) from e
    return FsEntity.from_stat(path, st)
