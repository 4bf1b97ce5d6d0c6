# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/query.py

"""Declarative query over holds and bookmarks."""

from dataclasses import dataclass, field
from typing import Optional

from zabstract.core.abstraction import AbstractionType
from zabstract.core.createtxg_range import CreateTXGRange
from zabstract.core.jobid import JobID
from zabstract.core.taxonomy import format_abstraction_type_set, validate_abstraction_type_set
from zabstract.system.cancellation import CancelToken
from zabstract.system.exceptions import ImplementationError, ValidationError
from zabstract.zfs.filters import DatasetFilter, list_mapping
from zabstract.zfs.names import EntityType, entity_namecheck


@dataclass(frozen=True)
class FilesystemFilter:
    """Exactly one of `fs` (a literal filesystem) or `filter` (a predicate) is set."""
    fs: Optional[str] = None
    filter: Optional[DatasetFilter] = None

    def validate(self) -> None:
        fs_set = self.fs is not None
        filter_set = self.filter is not None
        if fs_set == filter_set:
            raise ValidationError(
                f"must set FS or Filter field, but fsIsSet={fs_set} and filterIsSet={filter_set}"
            )
        if fs_set:
            try:
                entity_namecheck(self.fs, EntityType.FILESYSTEM)
            except ValidationError as e:
                raise ValidationError(f"FS invalid: {e}") from e

    def filesystems(self, driver, cancel: Optional[CancelToken] = None) -> list[str]:
        """Resolve to filesystem path strings. Must be called on a validated filter."""
        try:
            self.validate()
        except ValidationError as e:
            raise ImplementationError(f"filesystem filter used without validation: {e}") from e
        if self.fs is not None:
            return [self.fs]
        return [str(p) for p in list_mapping(driver, self.filter, cancel)]


@dataclass(frozen=True)
class ListZFSHoldsAndBookmarksQuery:
    """All fields must be satisfied (AND) by a matching Abstraction."""
    fs: FilesystemFilter
    # abstraction types that should match (any contained in the set)
    what: frozenset[AbstractionType]
    # if set, the marker's job must be equal (markers without a job always pass)
    job_id: Optional[JobID] = None
    # default: any createtxg is acceptable
    create_txg: CreateTXGRange = field(default_factory=CreateTXGRange)
    # number of concurrently queried filesystems
    concurrency: int = 1

    def validate(self) -> None:
        try:
            self.fs.validate()
        except ValidationError as e:
            raise ValidationError(f"FS: {e}") from e
        if self.job_id is not None:
            try:
                self.job_id.validate()
            except ValidationError as e:
                raise ValidationError(f"JobID: {e}") from e
        try:
            self.create_txg.validate()
        except ValidationError as e:
            raise ValidationError(f"CreateTXGRange: {e}") from e
        validate_abstraction_type_set(self.what)
        if self.concurrency < 1:
            raise ValidationError("Concurrency must be >= 1")

    def __str__(self) -> str:
        target = self.fs.fs if self.fs.fs is not None else repr(self.fs.filter)
        job = "*" if self.job_id is None else str(self.job_id)
        return (f"fs={target} what={format_abstraction_type_set(self.what)} "
                f"job={job} createtxg={self.create_txg} concurrency={self.concurrency}")
