# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.03
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/config/__init__.py

"""Configuration loading for zabstract."""

from .manager import ZAbstractConfig, load_config, createtxg_zero_allowed

__all__ = ["ZAbstractConfig", "load_config", "createtxg_zero_allowed"]
