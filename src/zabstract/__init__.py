# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/__init__.py

"""zabstract - bookkeeping of replication holds and bookmarks on ZFS."""

__version__ = "0.3.0"
