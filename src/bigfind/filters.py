"""Entity filter pipeline: an ordered set of predicates combined by AND."""

import enum
import logging
import math
import re
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .entity import FsEntity, FsKind
from .logging import log_with_context

# Virtual trees reporting unstable or infinite metadata. Never scanned.
PSEUDO_FILESYSTEM_ROOTS = ("/proc", "/sys", "/dev")


def is_excluded_path(path: str) -> bool:
    """Return True if ``path`` is, or is inside, a pseudo-filesystem root."""
    for root in PSEUDO_FILESYSTEM_ROOTS:
        if path == root or path.startswith(root + "/"):
            return True
    return False


class Mode(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"


class Rule(enum.Enum):
    """Filter rules, declared in evaluation order."""

    KIND = "kind"
    SIZE = "size"
    PATH_EXCLUSION = "path_exclusion"
    NAME = "name"
    AGE = "age"


@dataclass(frozen=True)
class FilterCriteria:
    """
    Read-only filter configuration for one run.

    Attributes:
        min_size: Minimum size in bytes (files in FILE mode, directories in DIRECTORY mode)
        pattern: Regular expression searched for in the entity's file name
        min_age: Minimum seconds since modification (inclusive)
        max_age: Maximum seconds since modification (inclusive)
        same_filesystem: Do not cross mount points away from the walk root
        mode: FILE or DIRECTORY

    Raises:
        ValueError: If any value is invalid
    """

    min_size: int = 0
    pattern: Optional[Union[str, re.Pattern]] = None
    min_age: Optional[float] = None
    max_age: Optional[float] = None
    same_filesystem: bool = False
    mode: Mode = Mode.FILE

    def __post_init__(self):
        if self.min_size < 0:
            raise ValueError(f"min_size must be >= 0, got {self.min_size}")
        if self.min_age is not None and self.min_age < 0:
            raise ValueError(f"min_age must be >= 0, got {self.min_age}")
        if self.max_age is not None and self.max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {self.max_age}")
        if not isinstance(self.mode, Mode):
            raise ValueError(f"mode must be a Mode, got {self.mode!r}")
        if isinstance(self.pattern, str):
            try:
                compiled = re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {self.pattern!r}: {e}") from e
            object.__setattr__(self, "pattern", compiled)

    @property
    def has_age_range(self) -> bool:
        return self.min_age is not None or self.max_age is not None

    @property
    def empty_age_range(self) -> bool:
        return self.min_age is not None and self.max_age is not None and self.min_age > self.max_age


class FilterPipeline:
    """
    Accept or reject entities according to a FilterCriteria.

    The rule list is fixed at construction; rules that are not configured are
    left out so evaluation short-circuits as early as possible.
    """

    def __init__(
        self,
        criteria: FilterCriteria,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.criteria = criteria
        self.logger = logger or logging.getLogger("bigfind")
        self.clock = clock
        self.rules = self._build_rules(criteria)

        if criteria.empty_age_range:
            log_with_context(
                self.logger,
                "warning",
                "Empty modification age range, every entity will be rejected",
                {"min_age": criteria.min_age, "max_age": criteria.max_age},
            )

    @staticmethod
    def _build_rules(criteria: FilterCriteria) -> tuple:
        rules = [Rule.KIND]
        if criteria.mode is Mode.FILE:
            rules.append(Rule.SIZE)
        rules.append(Rule.PATH_EXCLUSION)
        if criteria.pattern is not None:
            rules.append(Rule.NAME)
        if criteria.has_age_range:
            rules.append(Rule.AGE)
        return tuple(rules)

    def accept(self, entity: FsEntity) -> bool:
        """Return True if the entity passes every configured rule."""
        for rule in self.rules:
            if not self._check(rule, entity):
                return False
        return True

    def _check(self, rule: Rule, entity: FsEntity) -> bool:
        if rule is Rule.KIND:
            return self._check_kind(entity)
        if rule is Rule.SIZE:
            return entity.size >= self.criteria.min_size
        if rule is Rule.PATH_EXCLUSION:
            return not is_excluded_path(entity.path)
        if rule is Rule.NAME:
            return self._check_name(entity)
        if rule is Rule.AGE:
            return self._check_age(entity)
        raise ValueError(f"Unknown rule: {rule}")

    def _check_kind(self, entity: FsEntity) -> bool:
        if self.criteria.mode is Mode.FILE:
            return entity.kind is FsKind.FILE
        # Directory mode attributes any walked entity; non-files carry size 0
        return True

    def _check_name(self, entity: FsEntity) -> bool:
        name = entity.name
        if not name:
            return False
        return self.criteria.pattern.search(name) is not None

    def _check_age(self, entity: FsEntity) -> bool:
        if self.criteria.empty_age_range:
            return False

        now = self.clock()
        if entity.mod_time > now:
            log_with_context(
                self.logger,
                "warning",
                "Modification time is in the future",
                {"path": entity.path, "mod_time": entity.mod_time, "now": now},
            )
            return False

        elapsed = now - entity.mod_time
        if not math.isfinite(elapsed):
            return False

        min_age = self.criteria.min_age if self.criteria.min_age is not None else 0.0
        max_age = self.criteria.max_age if self.criteria.max_age is not None else math.inf
        return min_age <= elapsed <= max_age
