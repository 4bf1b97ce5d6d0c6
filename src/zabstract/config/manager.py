# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.03
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/config/manager.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from zabstract.system.exceptions import ConfigError


# ---- Constants ----

CONFIG_FILE: Final = "zabstract.yml"

# Allows CreateTXG range bounds of 0 (normally rejected as a likely mistake)
ALLOW_CREATETXG_ZERO_ENV: Final = "ZABSTRACT_CREATETXG_RANGE_BOUND_ALLOW_0"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _get_config_search_paths() -> tuple[Path, ...]:
    """Get config file search paths (ordered by priority: lowest to highest).

    Evaluated at call time so tests can redirect via environment variables.
    """
    return (
        Path("/etc/zabstract") / CONFIG_FILE,  # System defaults
        Path.home() / ".config" / "zabstract" / CONFIG_FILE,  # User config
        Path(os.getenv("XDG_CONFIG_HOME", "")) / "zabstract" / CONFIG_FILE,  # XDG override
        Path(os.getenv("ZABSTRACT_CONFIG_HOME", "")) / CONFIG_FILE,  # Explicit override (highest priority)
    )


def createtxg_zero_allowed() -> bool:
    """Whether CreateTXG range bounds may be 0."""
    return os.getenv(ALLOW_CREATETXG_ZERO_ENV, "").strip().lower() in _TRUTHY


class ZAbstractConfig(BaseModel):
    """Runtime settings for talking to the store and for logging."""
    model_config = ConfigDict(extra="forbid")

    zfs_binary: str = Field(default="zfs", description="zfs(8) executable")
    use_sudo: bool = Field(default=False, description="Run zfs commands through sudo -n")
    concurrency: int = Field(default=1, ge=1, description="Filesystems scanned in parallel")
    command_timeout: Optional[float] = Field(default=None, gt=0, description="Per-command timeout in seconds")
    local_log: Optional[Path] = Field(default=None, description="Directory for debug log files")


def _load_merged_config_data(candidates: tuple[Path, ...]) -> dict:
    """Merge YAML mappings from all existing candidates, later ones winning."""
    merged_data: dict = {}
    found_configs = []

    for candidate in candidates:
        if candidate == Path("") / CONFIG_FILE:  # Skip empty env vars
            continue
        if not candidate.exists():
            continue
        try:
            with candidate.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {candidate}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {candidate} must contain a mapping")
        merged_data.update(data)
        found_configs.append(str(candidate))
        logger.debug(f"Loaded config from {candidate}")

    if found_configs:
        logger.debug(f"Merged config from: {', '.join(found_configs)}")
    else:
        logger.debug("No config file found, using defaults")
    return merged_data


def load_config(candidates: Optional[tuple[Path, ...]] = None) -> ZAbstractConfig:
    """Load the merged configuration.

    Missing files are fine (all settings have defaults); malformed files or
    unknown keys raise ConfigError.
    """
    if candidates is None:
        candidates = _get_config_search_paths()
    data = _load_merged_config_data(candidates)
    try:
        return ZAbstractConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
