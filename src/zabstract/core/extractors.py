# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.06
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/extractors.py

"""
Extractors turn store version records into Abstractions.

A bookmark extractor receives (fs, bookmark version); a hold extractor
receives (fs, snapshot version, hold tag). Both return None when the record
does not belong to their AbstractionType.
"""

from typing import Callable, Optional

from loguru import logger

from zabstract.core.abstraction import (
    Abstraction,
    AbstractionType,
    BookmarkBasedAbstraction,
    HoldBasedAbstraction,
)
from zabstract.core.jobid import JobID
from zabstract.core.naming import (
    REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX,
    REPLICATION_CURSOR_BOOKMARK_NAME_V1,
    STEP_BOOKMARK_NAME_PREFIX,
    parse_job_and_guid_bookmark_name,
    parse_last_received_hold_tag,
    parse_step_hold_tag,
)
from zabstract.system.exceptions import ImplementationError, ValidationError
from zabstract.zfs.versions import DatasetPath, FilesystemVersion, VersionType

BookmarkExtractor = Callable[[DatasetPath, FilesystemVersion], Optional[Abstraction]]
HoldExtractor = Callable[[DatasetPath, FilesystemVersion, str], Optional[Abstraction]]


def _require(v: FilesystemVersion, vtype: VersionType) -> None:
    if v.type is not vtype:
        raise ImplementationError(f"extractor for {vtype.value}s called with {v.type.value} {v}")


def _job_and_guid_bookmark(fs: DatasetPath, v: FilesystemVersion, prefix: str,
                           atype: AbstractionType) -> Optional[Abstraction]:
    _require(v, VersionType.BOOKMARK)
    full_name = v.to_abs_path(fs)
    try:
        guid, job = parse_job_and_guid_bookmark_name(full_name, prefix)
        job_id = JobID.make(job)
    except ValidationError:
        return None
    if guid != v.guid:
        logger.warning(f"ignoring {full_name}: name encodes guid {guid:016x} but bookmark guid is {v.guid:016x}")
        return None
    return BookmarkBasedAbstraction(type=atype, fs=str(fs), filesystem_version=v, job_id=job_id)


def step_bookmark_extractor(fs: DatasetPath, v: FilesystemVersion) -> Optional[Abstraction]:
    return _job_and_guid_bookmark(fs, v, STEP_BOOKMARK_NAME_PREFIX, AbstractionType.STEP_BOOKMARK)


def replication_cursor_v2_extractor(fs: DatasetPath, v: FilesystemVersion) -> Optional[Abstraction]:
    return _job_and_guid_bookmark(
        fs, v, REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX, AbstractionType.REPLICATION_CURSOR_BOOKMARK_V2
    )


def replication_cursor_v1_extractor(fs: DatasetPath, v: FilesystemVersion) -> Optional[Abstraction]:
    _require(v, VersionType.BOOKMARK)
    if v.name != REPLICATION_CURSOR_BOOKMARK_NAME_V1:
        return None
    return BookmarkBasedAbstraction(
        type=AbstractionType.REPLICATION_CURSOR_BOOKMARK_V1,
        fs=str(fs),
        filesystem_version=v,
        job_id=None,
    )


def _job_hold(fs: DatasetPath, v: FilesystemVersion, tag: str,
              parse: Callable[[str], str], atype: AbstractionType) -> Optional[Abstraction]:
    _require(v, VersionType.SNAPSHOT)
    try:
        job_id = JobID.make(parse(tag))
    except ValidationError:
        return None
    return HoldBasedAbstraction(type=atype, fs=str(fs), filesystem_version=v, job_id=job_id, tag=tag)


def step_hold_extractor(fs: DatasetPath, v: FilesystemVersion, tag: str) -> Optional[Abstraction]:
    return _job_hold(fs, v, tag, parse_step_hold_tag, AbstractionType.STEP_HOLD)


def last_received_hold_extractor(fs: DatasetPath, v: FilesystemVersion, tag: str) -> Optional[Abstraction]:
    return _job_hold(fs, v, tag, parse_last_received_hold_tag, AbstractionType.LAST_RECEIVED_HOLD)
