# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.11
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/fixtures/fake_zfs.py

"""
In-memory store drivers for tests.

FakeZFSDriver keeps filesystems, snapshots, bookmarks and hold tags in dicts
and can be told to fail individual operations. ConcurrencyTrackingDriver
additionally records how many version listings ran at the same time.
"""

import threading
import time
from datetime import datetime, UTC

from zabstract.core.naming import (
    REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX,
    REPLICATION_CURSOR_BOOKMARK_NAME_V1,
    STEP_BOOKMARK_NAME_PREFIX,
    job_and_guid_bookmark_name,
    last_received_hold_tag_for,
    step_hold_tag_for,
)
from zabstract.system.exceptions import ZFSOperationError
from zabstract.zfs.versions import DatasetPath, FilesystemVersion, VersionType

CREATION = datetime(2025, 7, 1, 12, 0, 0, tzinfo=UTC)


def make_version(vtype: VersionType, name: str, guid: int, createtxg: int) -> FilesystemVersion:
    return FilesystemVersion(
        type=vtype,
        name=name,
        guid=guid,
        createtxg=createtxg,
        creation=CREATION,
        userrefs=0 if vtype is VersionType.SNAPSHOT else None,
    )


class FakeZFSDriver:
    def __init__(self):
        self.versions: dict[str, list[FilesystemVersion]] = {}
        self.hold_tags: dict[str, list[str]] = {}  # "fs@snap" -> tags
        self.fail_list_filesystems = False
        self.fail_versions: set[str] = set()  # fs
        self.fail_holds: set[str] = set()  # fs@snap
        self.fail_destroy: set[str] = set()  # full path
        self.calls: list[tuple] = []
        self._lock = threading.Lock()
        self._next_guid = 0x1000

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    # ---- population helpers ----

    def add_filesystem(self, fs: str) -> None:
        self.versions.setdefault(fs, [])

    def add_snapshot(self, fs: str, name: str, createtxg: int, holds=(), guid=None) -> FilesystemVersion:
        guid = guid if guid is not None else self._new_guid()
        v = make_version(VersionType.SNAPSHOT, name, guid, createtxg)
        self.versions.setdefault(fs, []).append(v)
        self.hold_tags[f"{fs}@{name}"] = list(holds)
        return v

    def add_bookmark(self, fs: str, name: str, createtxg: int, guid=None) -> FilesystemVersion:
        guid = guid if guid is not None else self._new_guid()
        v = make_version(VersionType.BOOKMARK, name, guid, createtxg)
        self.versions.setdefault(fs, []).append(v)
        return v

    def add_step_bookmark(self, fs: str, job: str, createtxg: int, guid=None) -> FilesystemVersion:
        guid = guid if guid is not None else self._new_guid()
        name = job_and_guid_bookmark_name(STEP_BOOKMARK_NAME_PREFIX, fs, guid, job)
        return self.add_bookmark(fs, name, createtxg, guid=guid)

    def add_cursor_bookmark(self, fs: str, job: str, createtxg: int, guid=None) -> FilesystemVersion:
        guid = guid if guid is not None else self._new_guid()
        name = job_and_guid_bookmark_name(REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX, fs, guid, job)
        return self.add_bookmark(fs, name, createtxg, guid=guid)

    def add_v1_cursor(self, fs: str, createtxg: int) -> FilesystemVersion:
        return self.add_bookmark(fs, REPLICATION_CURSOR_BOOKMARK_NAME_V1, createtxg)

    def add_step_hold(self, fs: str, snap: str, job: str, createtxg: int) -> FilesystemVersion:
        return self.add_snapshot(fs, snap, createtxg, holds=[step_hold_tag_for(job)])

    def add_last_received_hold(self, fs: str, snap: str, job: str, createtxg: int) -> FilesystemVersion:
        return self.add_snapshot(fs, snap, createtxg, holds=[last_received_hold_tag_for(job)])

    def _new_guid(self) -> int:
        self._next_guid += 1
        return self._next_guid

    # ---- ZFSDriver ----

    def list_filesystems(self, cancel=None):
        self._record("list_filesystems")
        if self.fail_list_filesystems:
            raise ZFSOperationError("cannot list filesystems: injected", zfs_command="list")
        return [DatasetPath.from_string(fs) for fs in sorted(self.versions)]

    def list_filesystem_versions(self, fs, cancel=None):
        fs = str(fs)
        self._record("list_filesystem_versions", fs)
        if cancel is not None:
            cancel.raise_if_cancelled()
        if fs in self.fail_versions:
            raise ZFSOperationError(f"cannot list versions of {fs}: injected", zfs_command="list", path=fs)
        return list(self.versions.get(fs, []))

    def holds(self, fs, snap, cancel=None):
        snapshot = f"{fs}@{snap}"
        self._record("holds", snapshot)
        if snapshot in self.fail_holds:
            raise ZFSOperationError(f"cannot list holds of {snapshot}: injected", zfs_command="holds", path=snapshot)
        return list(self.hold_tags.get(snapshot, []))

    def release(self, tag, snapshot, cancel=None):
        self._record("release", tag, snapshot)
        if snapshot in self.fail_destroy:
            raise ZFSOperationError(f"cannot release hold {tag!r} on {snapshot}: injected",
                                    zfs_command="release", path=snapshot)
        tags = self.hold_tags.get(snapshot, [])
        if tag in tags:
            tags.remove(tag)

    def destroy_idempotent(self, path, cancel=None):
        self._record("destroy", path)
        if path in self.fail_destroy:
            raise ZFSOperationError(f"cannot destroy {path}: injected", zfs_command="destroy", path=path)
        fs, _, name = path.partition("#")
        self.versions[fs] = [v for v in self.versions.get(fs, [])
                             if not (v.type is VersionType.BOOKMARK and v.name == name)]


class ConcurrencyTrackingDriver(FakeZFSDriver):
    """Records the peak number of concurrent list_filesystem_versions calls."""

    def __init__(self, delay: float = 0.05):
        super().__init__()
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    def list_filesystem_versions(self, fs, cancel=None):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
            return super().list_filesystem_versions(fs, cancel)
        finally:
            with self._lock:
                self.in_flight -= 1
