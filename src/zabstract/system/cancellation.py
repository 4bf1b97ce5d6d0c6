# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/cancellation.py

"""
Cancellation token threaded through every blocking store call.

A token is cancelled either explicitly via cancel() or implicitly once its
deadline passes. Blocking calls poll it and raise OperationCancelled.
"""

import threading
import time
from typing import Optional

from zabstract.system.exceptions import OperationCancelled


class CancelToken:
    """Shared, thread-safe cancellation flag with an optional deadline."""

    def __init__(self, deadline: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = deadline
        self._reason = "operation cancelled"

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancelToken":
        """Create a token that cancels itself after `seconds` (monotonic clock)."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self, reason: str = "operation cancelled") -> None:
        self._reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = "deadline exceeded"
            self._event.set()
            return True
        return False

    @property
    def reason(self) -> str:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise OperationCancelled(self._reason)


def background() -> CancelToken:
    """A token that is never cancelled unless someone calls cancel() on it."""
    return CancelToken()
