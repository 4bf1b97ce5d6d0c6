# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/execution.py

"""
Unified command execution for zfs shell-outs.

Every store call goes through CommandExecutor so that logging, sudo handling
and cancellation behave the same everywhere.
"""

import subprocess
from typing import Optional

from loguru import logger

from zabstract.system.cancellation import CancelToken
from zabstract.system.exceptions import CommandError, OperationCancelled

POLL_INTERVAL = 0.1


class CommandExecutor:
    """Run local commands, optionally through sudo, honouring a CancelToken."""

    @staticmethod
    def run_local(cmd: list[str], check: bool = True,
                  cancel: Optional[CancelToken] = None,
                  timeout: Optional[float] = None) -> subprocess.CompletedProcess:
        """Run `cmd` and capture its output as text.

        Bytes that are not valid UTF-8 (free-form hold tags, for one) decode
        to U+FFFD instead of failing the call.

        Args:
            cmd: Command and arguments
            check: Raise CommandError on non-zero exit
            cancel: Token polled while the command runs; the process is killed on cancellation
            timeout: Hard limit in seconds for this command alone

        Raises:
            CommandError: If check is True and the command fails (or cannot be started)
            OperationCancelled: If the token fires before the command completes
        """
        logger.debug(f"exec: {' '.join(cmd)}")
        if cancel is not None:
            cancel.raise_if_cancelled()

        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise CommandError(f"cannot execute {cmd[0]}: {e}", cmd=cmd) from e

        waited = 0.0
        while True:
            try:
                stdout, stderr = proc.communicate(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                waited += POLL_INTERVAL
                if cancel is not None and cancel.is_cancelled:
                    proc.kill()
                    proc.communicate()
                    raise OperationCancelled(f"{cancel.reason}: {' '.join(cmd)}")
                if timeout is not None and waited >= timeout:
                    proc.kill()
                    proc.communicate()
                    raise CommandError(f"command timed out after {timeout}s: {' '.join(cmd)}", cmd=cmd)

        result = subprocess.CompletedProcess(cmd, proc.returncode, stdout, stderr)
        if check and result.returncode != 0:
            raise CommandError(
                f"command failed with exit code {result.returncode}: {' '.join(cmd)}: {stderr.strip()}",
                cmd=cmd,
                returncode=result.returncode,
                stderr=stderr,
            )
        return result

    @staticmethod
    def run_sudo(cmd: list[str], check: bool = True,
                 cancel: Optional[CancelToken] = None,
                 timeout: Optional[float] = None) -> subprocess.CompletedProcess:
        """Run `cmd` through non-interactive sudo."""
        return CommandExecutor.run_local(["sudo", "-n", *cmd], check=check, cancel=cancel, timeout=timeout)
