# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/__init__.py

"""Cross-cutting infrastructure: errors, execution, cancellation, concurrency, logging, display."""
