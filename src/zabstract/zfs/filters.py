# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.04
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/zfs/filters.py

"""
Filesystem selection predicates.

A DatasetMapFilter is built from rules like::

    pool<             # pool and everything below it
    !pool/tmp<        # ...except pool/tmp and its children
    pool/tmp/keep     # ...but include exactly pool/tmp/keep

The most specific (longest) matching rule decides; at equal length an exact
rule beats a subtree rule. Paths no rule matches are excluded.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from zabstract.system.cancellation import CancelToken
from zabstract.system.exceptions import ValidationError
from zabstract.zfs.versions import DatasetPath

SUBTREE_SUFFIX = "<"
NEGATION_PREFIX = "!"


class DatasetFilter(Protocol):
    def filter(self, path: DatasetPath) -> bool:
        """Return True if `path` is selected."""
        ...


@dataclass(frozen=True)
class _Rule:
    path: Optional[DatasetPath]  # None: the root, i.e. every dataset
    subtree: bool
    include: bool

    def matches(self, path: DatasetPath) -> bool:
        if self.path is None:
            return True
        if self.subtree:
            return path.has_prefix(self.path)
        return path == self.path

    @property
    def specificity(self) -> tuple[int, int]:
        length = 0 if self.path is None else self.path.length
        return (length, 0 if self.subtree else 1)


def _parse_rule(pattern: str) -> _Rule:
    text = pattern.strip()
    include = True
    if text.startswith(NEGATION_PREFIX):
        include = False
        text = text[len(NEGATION_PREFIX):]
    subtree = text.endswith(SUBTREE_SUFFIX)
    if subtree:
        text = text[:-len(SUBTREE_SUFFIX)]
    if text == "":
        if not subtree:
            raise ValidationError(f"invalid filesystem filter pattern {pattern!r}: empty path")
        return _Rule(path=None, subtree=True, include=include)
    try:
        return _Rule(path=DatasetPath.from_string(text), subtree=subtree, include=include)
    except ValidationError as e:
        raise ValidationError(f"invalid filesystem filter pattern {pattern!r}: {e}") from e


class DatasetMapFilter:
    """Rule-based DatasetFilter."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = list(patterns)
        if not self.patterns:
            raise ValidationError("filesystem filter needs at least one pattern")
        rules = [_parse_rule(p) for p in self.patterns]
        seen: dict[tuple, bool] = {}
        for rule in rules:
            key = (rule.path, rule.subtree)
            if key in seen:
                raise ValidationError(f"duplicate filesystem filter pattern for {rule.path or '<root>'}")
            seen[key] = rule.include
        self._rules = rules

    def filter(self, path: DatasetPath) -> bool:
        best: Optional[_Rule] = None
        for rule in self._rules:
            if rule.matches(path) and (best is None or rule.specificity > best.specificity):
                best = rule
        return best is not None and best.include

    def __repr__(self) -> str:
        return f"DatasetMapFilter({self.patterns!r})"


def list_mapping(driver, dataset_filter: DatasetFilter,
                 cancel: Optional[CancelToken] = None) -> list[DatasetPath]:
    """All filesystems known to `driver` that `dataset_filter` selects."""
    return [p for p in driver.list_filesystems(cancel) if dataset_filter.filter(p)]
