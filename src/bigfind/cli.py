"""Command-line interface for bigfind."""

import argparse
import asyncio
import os
import sys

from . import __version__
from .config import Config
from .filters import Mode
from .finder import async_main
from .units import parse_duration, parse_size


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _size(value: str) -> int:
    try:
        return parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _duration(value: str) -> float:
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bigfind",
        description="bigfind - Find large files and directories",
    )

    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Directories to look for files in (default: current directory)",
    )

    parser.add_argument(
        "-d",
        "--depth",
        type=_non_negative_int,
        default=os.getenv("BIGFIND_DEPTH"),
        help="Descend at most this many directory levels; 0 only looks at the first level (default: unlimited)",
    )

    parser.add_argument(
        "-s",
        "--size",
        type=_size,
        default=os.getenv("BIGFIND_SIZE", "100m"),
        help="Minimum size, e.g. 400 (bytes), 20m or 5g (default: 100m)",
    )

    parser.add_argument(
        "-l",
        "--limit",
        type=_positive_int,
        default=os.getenv("BIGFIND_LIMIT"),
        help="Stop after this many results (default: unlimited)",
    )

    parser.add_argument(
        "-p",
        "--pattern",
        default=os.getenv("BIGFIND_PATTERN"),
        help="Only include files whose name matches this regular expression",
    )

    parser.add_argument(
        "--newer-than",
        type=_duration,
        default=os.getenv("BIGFIND_NEWER_THAN"),
        help="Only include files modified within this duration, e.g. 2h, 3d, 5M, 1y",
    )

    parser.add_argument(
        "--older-than",
        type=_duration,
        default=os.getenv("BIGFIND_OLDER_THAN"),
        help="Only include files modified at least this long ago",
    )

    parser.add_argument(
        "-x",
        "--same-filesystem",
        action="store_true",
        default=_env_flag("BIGFIND_SAME_FILESYSTEM"),
        help="Do not descend into directories on other filesystems",
    )

    parser.add_argument(
        "-D",
        "--dirs",
        action="store_true",
        default=_env_flag("BIGFIND_DIRS"),
        help="Report total size per directory instead of individual files",
    )

    parser.add_argument(
        "-P",
        "--plumbing",
        action="store_true",
        default=_env_flag("BIGFIND_PLUMBING"),
        help="Machine readable output",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("BIGFIND_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (logs go to stderr)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bigfind {__version__}",
    )

    return parser


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        paths=list(args.paths),
        max_depth=args.depth,
        min_size=args.size,
        limit=args.limit,
        pattern=args.pattern,
        min_age=args.older_than,
        max_age=args.newer_than,
        same_filesystem=args.same_filesystem,
        mode=Mode.DIRECTORY if args.dirs else Mode.FILE,
        plumbing=args.plumbing,
        log_level=args.log_level,
    )


def main(argv=None) -> None:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    try:
        asyncio.run(async_main(config_from_args(args)))
        sys.exit(0)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
