# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/__init__.py

"""
Abstraction lifecycle core.

This package provides:
- CreateTXG range arithmetic
- The abstraction taxonomy (types, quotas, extractors)
- Streaming enumeration of holds and bookmarks
- Live/stale classification and batch destruction
"""

from .abstraction import Abstraction, AbstractionType, BookmarkBasedAbstraction, HoldBasedAbstraction
from .createtxg_range import CreateTXGRange, CreateTXGRangeBound
from .destroy import BatchDestroyResult, batch_destroy
from .jobid import JobID
from .listing import list_abstractions, list_abstractions_streamed
from .query import FilesystemFilter, ListZFSHoldsAndBookmarksQuery
from .staleness import StalenessInfo, classify_staleness, list_stale
from .taxonomy import (
    ALL_ABSTRACTION_TYPES,
    abstraction_type_set_from_strings,
    format_abstraction_type_set,
    num_live_per_fs_and_job,
    validate_abstraction_type,
)

__all__ = [
    "Abstraction",
    "AbstractionType",
    "BookmarkBasedAbstraction",
    "HoldBasedAbstraction",
    "CreateTXGRange",
    "CreateTXGRangeBound",
    "BatchDestroyResult",
    "batch_destroy",
    "JobID",
    "list_abstractions",
    "list_abstractions_streamed",
    "FilesystemFilter",
    "ListZFSHoldsAndBookmarksQuery",
    "StalenessInfo",
    "classify_staleness",
    "list_stale",
    "ALL_ABSTRACTION_TYPES",
    "abstraction_type_set_from_strings",
    "format_abstraction_type_set",
    "num_live_per_fs_and_job",
    "validate_abstraction_type",
]
