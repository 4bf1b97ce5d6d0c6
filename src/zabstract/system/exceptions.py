# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/exceptions.py

"""
zabstract-specific exception classes.

Recoverable conditions (bad input, failing zfs commands, cancellation) derive
from ZAbstractError. ImplementationError is kept outside that hierarchy: it
marks a broken internal invariant and must not be caught by handlers that
deal with user or runtime errors.
"""

from typing import Optional


class ZAbstractError(Exception):
    """Base exception for all zabstract errors."""
    pass


class ConfigError(ZAbstractError):
    """Raised when configuration loading or validation fails."""
    pass


class ValidationError(ZAbstractError):
    """Raised when a query, range, type string, name or filter is malformed."""
    pass


class OperationCancelled(ZAbstractError):
    """Raised when a blocking call observes a cancelled CancelToken."""
    pass


class ImplementationError(AssertionError):
    """Internal consistency bug, e.g. a taxonomy entry with misconfigured extractors."""
    pass


# === STORE OPERATION ERRORS ===

class CommandError(ZAbstractError):
    """A shelled-out command exited non-zero."""

    def __init__(self, message: str, cmd: Optional[list[str]] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class ZFSOperationError(ZAbstractError):
    """A zfs list/holds/release/destroy operation failed."""

    def __init__(self, message: str, zfs_command: Optional[str] = None, path: Optional[str] = None):
        self.zfs_command = zfs_command
        self.path = path
        super().__init__(message)


# === ENUMERATION ERRORS ===

class ListAbstractionsError(ZAbstractError):
    """Enumeration failure scoped to one filesystem (and snapshot, if any)."""

    def __init__(self, err: BaseException, fs: str = "", snap: str = "", what: str = ""):
        self.err = err
        self.fs = fs
        self.snap = snap
        self.what = what
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.fs:
            return f"list endpoint abstractions: {self.what}: {self.err}"
        location = self.fs
        if self.snap:
            location = f"{self.fs}@{self.snap}"
        return f'list endpoint abstractions on "{location}": {self.what}: {self.err}'

    def to_dict(self) -> dict[str, str]:
        return {
            "FS": self.fs,
            "Snap": self.snap,
            "What": self.what,
            "Err": str(self.err),
        }


class ListAbstractionsErrors(ZAbstractError):
    """Non-empty collection of per-filesystem enumeration errors."""

    def __init__(self, errors: list[ListAbstractionsError]):
        if not errors:
            raise ImplementationError("ListAbstractionsErrors requires at least one error")
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return f"list endpoint abstractions: {self.errors[0]}"
        msgs = "\n".join(str(e) for e in self.errors)
        return f"list endpoint abstractions: multiple errors:\n{msgs}"

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)
