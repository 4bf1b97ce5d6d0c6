# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/cli/commands/__init__.py

"""
Command handlers for zabstract CLI operations.

- abstractions: list, release-stale, release-all
"""
