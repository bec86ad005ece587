"""
Channel between a producer thread and the single-threaded annotation loop.
"""

import queue
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LatestMessageChannel(Generic[T]):
    """
    Thread-safe channel where the receiver only cares about the newest message.

    ``try_recv_latest`` never blocks. Older messages still queued are dropped.
    """

    def __init__(self):
        self._queue: "queue.Queue[T]" = queue.Queue()

    def send(self, msg: T):
        self._queue.put_nowait(msg)

    def try_recv_latest(self) -> Optional[T]:
        latest: Optional[T] = None
        while True:
            try:
                latest = self._queue.get_nowait()
            except queue.Empty:
                return latest
