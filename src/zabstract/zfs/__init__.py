# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.03
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/zfs/__init__.py

"""
Store driver boundary.

Name rules, version records, filesystem filters and the zfs(8) driver that
the abstraction core talks to.
"""

from .versions import DatasetPath, FilesystemVersion, VersionType
from .filters import DatasetFilter, DatasetMapFilter, list_mapping
from .driver import ZFSDriver, ZFSCommandDriver

__all__ = [
    "DatasetPath",
    "FilesystemVersion",
    "VersionType",
    "DatasetFilter",
    "DatasetMapFilter",
    "list_mapping",
    "ZFSDriver",
    "ZFSCommandDriver",
]
