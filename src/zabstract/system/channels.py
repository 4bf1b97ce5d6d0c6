# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/channels.py

"""Unbounded, closable single-consumer queues used for streaming results."""

import queue
import threading
from typing import Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

_CLOSED = object()


class Channel(Generic[T]):
    """Producer/consumer queue that the producer closes when done.

    Producers never block (the queue is unbounded). Iterating yields items
    until the channel is closed; a channel is meant to be iterated by one
    consumer exactly once.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False
        self._error: Optional[BaseException] = None

    def put(self, item: T) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("put on closed channel")
            self._queue.put(item)

    def close(self, error: Optional[BaseException] = None) -> None:
        """Close the channel. If `error` is given, the consumer re-raises it after the last item."""
        with self._lock:
            if self._closed:
                raise RuntimeError("channel closed twice")
            self._closed = True
            self._error = error
            self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                if self._error is not None:
                    raise self._error
                return
            yield item

    def drain(self) -> list[T]:
        """Consume the channel until it is closed and return all items."""
        return list(self)
