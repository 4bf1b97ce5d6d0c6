# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.03
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/zfs/names.py

"""
ZFS entity name rules.

Mirrors the checks zfs(8) applies to dataset, snapshot and bookmark names
and to hold tags, so that invalid names are rejected before any command runs.
"""

import re
from enum import Enum

from zabstract.system.exceptions import ValidationError

# ZFS_MAX_DATASET_NAME_LEN, includes the terminating NUL in C
MAX_DATASET_NAME_LEN = 256

_COMPONENT_RE = re.compile(r"^[A-Za-z0-9_\-:. ]+$")


class EntityType(str, Enum):
    FILESYSTEM = "filesystem"
    SNAPSHOT = "snapshot"
    BOOKMARK = "bookmark"


def component_namecheck(component: str) -> None:
    """Validate one path component (or snapshot/bookmark short name)."""
    if not component:
        raise ValidationError("empty component")
    if component in (".", ".."):
        raise ValidationError(f"component {component!r} is reserved")
    if not _COMPONENT_RE.match(component):
        raise ValidationError(f"component {component!r} contains invalid characters")


def entity_namecheck(path: str, entity_type: EntityType) -> None:
    """Validate a full filesystem, snapshot (fs@name) or bookmark (fs#name) path."""
    if len(path) >= MAX_DATASET_NAME_LEN:
        raise ValidationError(f"name {path!r} exceeds maximum length of {MAX_DATASET_NAME_LEN - 1}")

    if entity_type == EntityType.FILESYSTEM:
        if "@" in path or "#" in path:
            raise ValidationError(f"filesystem name {path!r} must not contain '@' or '#'")
        fs, version = path, None
    else:
        delim = "@" if entity_type == EntityType.SNAPSHOT else "#"
        fs, sep, version = path.partition(delim)
        if not sep:
            raise ValidationError(f"{entity_type.value} name {path!r} must contain {delim!r}")
        if "@" in fs or "#" in fs:
            raise ValidationError(f"{entity_type.value} name {path!r} has more than one version delimiter")

    if fs.startswith("/") or fs.endswith("/"):
        raise ValidationError(f"name {path!r} must not start or end with '/'")
    for comp in fs.split("/"):
        try:
            component_namecheck(comp)
        except ValidationError as e:
            raise ValidationError(f"invalid name {path!r}: {e}") from e

    if version is not None:
        try:
            component_namecheck(version)
        except ValidationError as e:
            raise ValidationError(f"invalid name {path!r}: {e}") from e


def valid_hold_tag(tag: str) -> None:
    """Hold tags are free-form but must be non-empty and shorter than MAXNAMELEN."""
    if not tag:
        raise ValidationError("hold tag must not be empty")
    if len(tag) >= MAX_DATASET_NAME_LEN:
        raise ValidationError(f"hold tag {tag!r} exceeds maximum length of {MAX_DATASET_NAME_LEN - 1}")


def decompose_version_string(v: str) -> tuple[str, str, str]:
    """Split `fs@snap` / `fs#bookmark` into (fs, delimiter, name)."""
    for delim in ("#", "@"):
        fs, sep, name = v.partition(delim)
        if sep:
            if not fs or not name:
                raise ValidationError(f"version string {v!r} has an empty filesystem or name")
            return fs, delim, name
    raise ValidationError(f"version string {v!r} contains neither '@' nor '#'")
