# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.06
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/abstraction.py

"""
Uniform read-only view over replication markers.

An Abstraction is a snapshot of store state taken at enumeration time: it
references a bookmark, or a hold tag on a snapshot, by coordinates and knows
how to remove it. There are two concrete variants, chosen by the taxonomy's
extractor for each AbstractionType.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import orjson

from zabstract.core.jobid import JobID
from zabstract.system.cancellation import CancelToken
from zabstract.zfs.versions import FilesystemVersion


class AbstractionType(str, Enum):
    STEP_BOOKMARK = "step-bookmark"
    STEP_HOLD = "step-hold"
    LAST_RECEIVED_HOLD = "last-received-hold"
    REPLICATION_CURSOR_BOOKMARK_V1 = "replication-cursor-bookmark-v1"
    REPLICATION_CURSOR_BOOKMARK_V2 = "replication-cursor-bookmark-v2"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Abstraction(ABC):
    type: AbstractionType
    fs: str
    filesystem_version: FilesystemVersion
    job_id: Optional[JobID]  # None for markers created outside a job

    @property
    def name(self) -> str:
        return self.filesystem_version.name

    @property
    def createtxg(self) -> int:
        return self.filesystem_version.createtxg

    @property
    @abstractmethod
    def full_path(self) -> str:
        ...

    @abstractmethod
    def destroy(self, driver, cancel: Optional[CancelToken] = None) -> None:
        """Release the hold or destroy the bookmark."""
        ...

    def to_dict(self) -> dict[str, Any]:
        return {
            "Type": self.type.value,
            "FS": self.fs,
            "Name": self.name,
            "FullPath": self.full_path,
            "JobID": None if self.job_id is None else str(self.job_id),
            "CreateTXG": self.createtxg,
            "FilesystemVersion": self.filesystem_version.to_dict(),
            "String": str(self),
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())


@dataclass(frozen=True)
class BookmarkBasedAbstraction(Abstraction):

    @property
    def full_path(self) -> str:
        return f"{self.fs}#{self.name}"

    def destroy(self, driver, cancel: Optional[CancelToken] = None) -> None:
        driver.destroy_idempotent(self.full_path, cancel)

    def __str__(self) -> str:
        return f"{self.type} {self.full_path}"


@dataclass(frozen=True)
class HoldBasedAbstraction(Abstraction):
    tag: str

    @property
    def full_path(self) -> str:
        return f"{self.fs}@{self.name}"

    def destroy(self, driver, cancel: Optional[CancelToken] = None) -> None:
        driver.release(self.tag, self.full_path, cancel)

    def __str__(self) -> str:
        return f'{self.type} "{self.tag}" on {self.full_path}'
