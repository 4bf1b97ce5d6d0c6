# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/semaphore.py

"""Counting semaphore whose acquisition honours a CancelToken."""

import threading
from typing import Optional

from zabstract.system.cancellation import CancelToken

# How often a blocked acquire re-checks the cancel token
POLL_INTERVAL = 0.05


class Guard:
    """Held slot of a Semaphore. Release exactly once (or use as context manager)."""

    def __init__(self, sem: threading.Semaphore) -> None:
        self._sem = sem
        self._released = False

    def release(self) -> None:
        if self._released:
            raise RuntimeError("semaphore guard released twice")
        self._released = True
        self._sem.release()

    def __enter__(self) -> "Guard":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class Semaphore:
    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"semaphore capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._sem = threading.BoundedSemaphore(capacity)

    def acquire(self, cancel: Optional[CancelToken] = None) -> Guard:
        """Block until a slot is free.

        Raises:
            OperationCancelled: if `cancel` fires before a slot becomes free
        """
        while True:
            if cancel is not None:
                cancel.raise_if_cancelled()
            if self._sem.acquire(timeout=POLL_INTERVAL):
                return Guard(self._sem)
