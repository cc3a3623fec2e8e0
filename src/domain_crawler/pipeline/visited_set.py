"""
Visited Set - Records every URL that has been claimed for fetching.
"""

import threading
import logging
from typing import FrozenSet, Set


class VisitedSet:
    """
    Thread-safe set of claimed URLs.

    check_and_insert() is the only way to claim a URL: testing membership
    and inserting happen under one lock, so for any URL exactly one
    caller ever sees True. URLs are compared exactly (paths are
    case-sensitive).
    """

    def __init__(self):
        self._urls: Set[str] = set()
        self.lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    def check_and_insert(self, url: str) -> bool:
        """
        Claim a URL.

        Returns:
            True if this call inserted the URL, False if it was already
            present
        """
        with self.lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def size(self) -> int:
        """Get count of claimed URLs."""
        with self.lock:
            return len(self._urls)

    def snapshot(self) -> FrozenSet[str]:
        """Get a frozen copy of the claimed URLs."""
        with self.lock:
            return frozenset(self._urls)

    def __contains__(self, url: str) -> bool:
        with self.lock:
            return url in self._urls

    def __len__(self) -> int:
        return self.size()
