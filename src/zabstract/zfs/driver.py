# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.04
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/zfs/driver.py

"""
Store driver boundary.

ZFSDriver is the minimal interface the abstraction core needs from the
store. ZFSCommandDriver implements it by shelling out to zfs(8) and parsing
its scripted (-H -p) output.
"""

from datetime import datetime, UTC
from typing import Optional, Protocol

from loguru import logger

from zabstract.config.manager import ZAbstractConfig
from zabstract.system.cancellation import CancelToken
from zabstract.system.exceptions import CommandError, ValidationError, ZFSOperationError
from zabstract.system.execution import CommandExecutor as ce
from zabstract.zfs.names import EntityType, entity_namecheck, valid_hold_tag
from zabstract.zfs.versions import DatasetPath, FilesystemVersion, VersionType

_VERSION_PROPS = "name,guid,createtxg,creation,userrefs"

# stderr fragments meaning "already gone"; destroy/release treat them as success
_DOES_NOT_EXIST_MARKERS = (
    "does not exist",
    "could not find any snapshots to destroy",
)
_NO_SUCH_TAG_MARKER = "no such tag on this dataset"


class ZFSDriver(Protocol):
    """Operations on the store that the abstraction core depends on."""

    def list_filesystems(self, cancel: Optional[CancelToken] = None) -> list[DatasetPath]:
        """List all filesystems and volumes."""
        ...

    def list_filesystem_versions(self, fs: DatasetPath,
                                 cancel: Optional[CancelToken] = None) -> list[FilesystemVersion]:
        """List snapshots and bookmarks directly on `fs`."""
        ...

    def holds(self, fs: str, snap: str, cancel: Optional[CancelToken] = None) -> list[str]:
        """List hold tags on snapshot `fs@snap`."""
        ...

    def release(self, tag: str, snapshot: str, cancel: Optional[CancelToken] = None) -> None:
        """Release hold `tag` from full snapshot path `snapshot`."""
        ...

    def destroy_idempotent(self, path: str, cancel: Optional[CancelToken] = None) -> None:
        """Destroy a snapshot or bookmark; a missing entity is not an error."""
        ...


def parse_version_line(fs: DatasetPath, line: str) -> FilesystemVersion:
    """Parse one line of `zfs list -H -p -o name,guid,createtxg,creation,userrefs`."""
    fields = line.split("\t")
    if len(fields) != 5:
        raise ZFSOperationError(f"unexpected zfs list output line: {line!r}", zfs_command="list")
    full_name, guid, createtxg, creation, userrefs = fields

    if "#" in full_name:
        vtype = VersionType.BOOKMARK
    elif "@" in full_name:
        vtype = VersionType.SNAPSHOT
    else:
        raise ZFSOperationError(f"zfs list returned non-version {full_name!r}", zfs_command="list")
    fs_part, _, name = full_name.partition(vtype.delimiter)
    if fs_part != str(fs):
        raise ZFSOperationError(
            f"zfs list returned version {full_name!r} of foreign filesystem", zfs_command="list", path=str(fs)
        )

    try:
        return FilesystemVersion(
            type=vtype,
            name=name,
            guid=int(guid),
            createtxg=int(createtxg),
            creation=datetime.fromtimestamp(int(creation), UTC),
            userrefs=None if userrefs == "-" else int(userrefs),
        )
    except ValueError as e:
        raise ZFSOperationError(f"cannot parse zfs list output line {line!r}: {e}", zfs_command="list") from e


class ZFSCommandDriver:
    """ZFSDriver backed by the zfs(8) command line tool."""

    def __init__(self, zfs_binary: str = "zfs", use_sudo: bool = False,
                 command_timeout: Optional[float] = None) -> None:
        self.zfs_binary = zfs_binary
        self.use_sudo = use_sudo
        self.command_timeout = command_timeout

    @classmethod
    def from_config(cls, config: ZAbstractConfig) -> "ZFSCommandDriver":
        return cls(
            zfs_binary=config.zfs_binary,
            use_sudo=config.use_sudo,
            command_timeout=config.command_timeout,
        )

    def _run(self, args: list[str], cancel: Optional[CancelToken], check: bool = True):
        cmd = [self.zfs_binary, *args]
        if self.use_sudo:
            return ce.run_sudo(cmd, check=check, cancel=cancel, timeout=self.command_timeout)
        return ce.run_local(cmd, check=check, cancel=cancel, timeout=self.command_timeout)

    def list_filesystems(self, cancel: Optional[CancelToken] = None) -> list[DatasetPath]:
        try:
            result = self._run(["list", "-H", "-p", "-o", "name", "-t", "filesystem,volume"], cancel)
        except CommandError as e:
            raise ZFSOperationError(f"cannot list filesystems: {e}", zfs_command="list") from e
        paths = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            try:
                paths.append(DatasetPath.from_string(line.strip()))
            except ValidationError as e:
                raise ZFSOperationError(f"zfs list returned invalid dataset name: {e}", zfs_command="list") from e
        return paths

    def list_filesystem_versions(self, fs: DatasetPath,
                                 cancel: Optional[CancelToken] = None) -> list[FilesystemVersion]:
        args = ["list", "-H", "-p", "-o", _VERSION_PROPS, "-r", "-d", "1", "-t", "bookmark,snapshot", str(fs)]
        try:
            result = self._run(args, cancel)
        except CommandError as e:
            raise ZFSOperationError(
                f"cannot list versions of {fs}: {e}", zfs_command="list", path=str(fs)
            ) from e
        return [parse_version_line(fs, line) for line in result.stdout.splitlines() if line.strip()]

    def holds(self, fs: str, snap: str, cancel: Optional[CancelToken] = None) -> list[str]:
        snapshot = f"{fs}@{snap}"
        entity_namecheck(snapshot, EntityType.SNAPSHOT)
        try:
            result = self._run(["holds", "-H", snapshot], cancel)
        except CommandError as e:
            raise ZFSOperationError(f"cannot list holds of {snapshot}: {e}", zfs_command="holds", path=snapshot) from e

        tags = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            name, sep, rest = line.partition("\t")
            tag, sep2, _timestamp = rest.rpartition("\t")
            if not sep or not sep2 or name != snapshot:
                raise ZFSOperationError(f"unexpected zfs holds output line: {line!r}", zfs_command="holds", path=snapshot)
            tags.append(tag)
        return tags

    def release(self, tag: str, snapshot: str, cancel: Optional[CancelToken] = None) -> None:
        valid_hold_tag(tag)
        entity_namecheck(snapshot, EntityType.SNAPSHOT)
        result = self._run(["release", tag, snapshot], cancel, check=False)
        if result.returncode == 0:
            return
        if _NO_SUCH_TAG_MARKER in result.stderr:
            logger.debug(f"hold {tag!r} already released from {snapshot}")
            return
        raise ZFSOperationError(
            f"cannot release hold {tag!r} on {snapshot}: {result.stderr.strip()}",
            zfs_command="release", path=snapshot,
        )

    def destroy_idempotent(self, path: str, cancel: Optional[CancelToken] = None) -> None:
        if "#" in path:
            entity_namecheck(path, EntityType.BOOKMARK)
        else:
            entity_namecheck(path, EntityType.SNAPSHOT)
        result = self._run(["destroy", path], cancel, check=False)
        if result.returncode == 0:
            return
        if any(marker in result.stderr for marker in _DOES_NOT_EXIST_MARKERS):
            logger.debug(f"{path} already destroyed")
            return
        raise ZFSOperationError(
            f"cannot destroy {path}: {result.stderr.strip()}", zfs_command="destroy", path=path
        )
