"""Reporting sinks for accepted files, directory totals and run summaries."""

import os
import sys
from dataclasses import dataclass, field
from typing import Protocol, TextIO

from .entity import FsEntity
from .filters import Mode
from .units import format_size


@dataclass(frozen=True)
class ScanSummary:
    """Result of one run: how many entries were reported and their total size."""

    mode: Mode
    found: int
    total_size: int

    @property
    def kind(self) -> str:
        return "files" if self.mode is Mode.FILE else "directories"


def display_path(path: str) -> str:
    """
    Return ``path`` in a form any UTF-8 stream can print.

    Names that are not valid UTF-8 come back from the OS with surrogate
    escapes; their raw bytes are shown as ``\\xNN`` instead.
    """
    return os.fsencode(path).decode("utf-8", errors="backslashreplace")


class ReportSink(Protocol):
    def report_file(self, entity: FsEntity) -> None: ...

    def report_directory(self, path: str, size: int) -> None: ...

    def report_summary(self, summary: ScanSummary) -> None: ...


class ConsoleSink:
    """
    Print results to a text stream.

    Porcelain output is meant for people; plumbing output is a stable
    ``bytes, path`` layout meant for other programs.
    """

    def __init__(self, plumbing: bool = False, stream: TextIO | None = None):
        self.plumbing = plumbing
        self.stream = stream if stream is not None else sys.stdout

    def _write(self, line: str) -> None:
        print(line, file=self.stream)

    def _entry(self, path: str, size: int) -> None:
        if self.plumbing:
            self._write(f"{size}, {display_path(path)}")
        else:
            self._write(f"{format_size(size):>10} │ {display_path(path)}")

    def report_file(self, entity: FsEntity) -> None:
        self._entry(entity.path, entity.size)

    def report_directory(self, path: str, size: int) -> None:
        self._entry(path, size)

    def report_summary(self, summary: ScanSummary) -> None:
        if self.plumbing:
            self._write("-----")
            self._write(f"{summary.total_size}, {summary.found}")
        else:
            self._write(
                f"Found {summary.found} {summary.kind} with a total size of {format_size(summary.total_size)}"
            )


@dataclass
class CollectingSink:
    """Keep everything reported in memory."""

    files: list = field(default_factory=list)
    directories: list = field(default_factory=list)
    summaries: list = field(default_factory=list)

    def report_file(self, entity: FsEntity) -> None:
        self.files.append(entity)

    def report_directory(self, path: str, size: int) -> None:
        self.directories.append((path, size))

    def report_summary(self, summary: ScanSummary) -> None:
        self.summaries.append(summary)

    @property
    def summary(self) -> ScanSummary | None:
        return self.summaries[-1] if self.summaries else None
