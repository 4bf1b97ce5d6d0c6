# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.03
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/zfs/versions.py

"""Dataset paths and filesystem version records (snapshots and bookmarks)."""

from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from typing import Optional

from zabstract.zfs.names import EntityType, entity_namecheck


class VersionType(str, Enum):
    SNAPSHOT = "snapshot"
    BOOKMARK = "bookmark"

    @property
    def delimiter(self) -> str:
        return "@" if self is VersionType.SNAPSHOT else "#"


@dataclass(frozen=True)
class DatasetPath:
    """A filesystem or volume path, e.g. ``pool/data/home``."""
    comps: tuple[str, ...]

    @classmethod
    def from_string(cls, path: str) -> "DatasetPath":
        """Parse and validate a dataset path.

        Raises:
            ValidationError: If the path is not a valid filesystem name
        """
        entity_namecheck(path, EntityType.FILESYSTEM)
        return cls(tuple(path.split("/")))

    def has_prefix(self, prefix: "DatasetPath") -> bool:
        return self.comps[:len(prefix.comps)] == prefix.comps

    @property
    def length(self) -> int:
        return len(self.comps)

    def __str__(self) -> str:
        return "/".join(self.comps)


@dataclass(frozen=True)
class FilesystemVersion:
    """One snapshot or bookmark of a filesystem as reported by the store."""
    type: VersionType
    name: str  # short name, without fs and delimiter
    guid: int
    createtxg: int
    creation: datetime
    userrefs: Optional[int] = None  # only meaningful for snapshots

    @property
    def relative_name(self) -> str:
        return f"{self.type.delimiter}{self.name}"

    def to_abs_path(self, fs) -> str:
        return f"{fs}{self.relative_name}"

    def __str__(self) -> str:
        return self.relative_name

    def to_dict(self) -> dict:
        return {
            "Type": self.type.value,
            "Name": self.name,
            "Guid": self.guid,
            "CreateTXG": self.createtxg,
            "Creation": self.creation.astimezone(UTC).isoformat(),
            "UserRefs": self.userrefs,
        }
