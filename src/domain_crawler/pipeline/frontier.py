"""
Frontier - Shared blocking FIFO queue of URLs awaiting fetch.
File: src/domain_crawler/pipeline/frontier.py

Workers block in pop() until a URL is available or a stop has been
requested. Once stopped, pop() keeps handing out queued URLs until the
queue is exhausted and only then returns the STOP sentinel.
"""
import logging
import threading
from collections import deque
from typing import Deque, Union


class _StopSentinel:
    """Marker returned by Frontier.pop() once the crawl is over."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "STOP"

    def __bool__(self) -> bool:
        return False


STOP = _StopSentinel()


class Frontier:
    """
    Thread-safe unbounded FIFO of resolved URLs with a stop signal.

    The queue and the stop flag are guarded by a single condition
    variable, so a consumer can never miss the transition to stopped.
    No deduplication happens here; the visited set owns that.
    """

    def __init__(self):
        self._queue: Deque[str] = deque()
        self._cond = threading.Condition()
        self._stop_requested = False
        self.logger = logging.getLogger(self.__class__.__name__)

    def push(self, url: str) -> None:
        """Append a URL at the tail and wake one waiting consumer."""
        with self._cond:
            self._queue.append(url)
            self._cond.notify()

    def pop(self) -> Union[str, _StopSentinel]:
        """
        Remove and return the URL at the head of the queue.

        Blocks until an item is available or a stop has been requested.

        Returns:
            The next URL, or STOP when stop was requested and the queue
            is empty.
        """
        with self._cond:
            while not self._queue and not self._stop_requested:
                self._cond.wait()

            if not self._queue:
                return STOP

            return self._queue.popleft()

    def request_stop(self) -> None:
        """Set the stop flag and wake every blocked consumer."""
        with self._cond:
            if self._stop_requested:
                return
            self._stop_requested = True
            self._cond.notify_all()
        self.logger.info("Stop requested")

    @property
    def stop_requested(self) -> bool:
        with self._cond:
            return self._stop_requested

    def is_empty(self) -> bool:
        """Non-blocking snapshot; may be stale as soon as it returns."""
        with self._cond:
            return not self._queue

    def size(self) -> int:
        with self._cond:
            return len(self._queue)

    def clear(self) -> int:
        """
        Discard all pending URLs.

        Returns:
            Number of URLs discarded
        """
        with self._cond:
            discarded = len(self._queue)
            self._queue.clear()
        if discarded:
            self.logger.info(f"Discarded {discarded} pending URLs")
        return discarded

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"<Frontier size={self.size()} stop_requested={self.stop_requested}>"
