"""
Crawl Context - Shared state of a single crawl run.
File: src/domain_crawler/pipeline/crawl_context.py
"""
import threading
from dataclasses import dataclass, field

from .frontier import Frontier
from .visited_set import VisitedSet


class ActiveWorkerCounter:
    """Count of workers currently processing a claimed URL."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        with self._lock:
            if self._value <= 0:
                raise RuntimeError("Active worker counter would go negative")
            self._value -= 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"ActiveWorkerCounter({self.value})"


@dataclass
class CrawlContext:
    """
    Everything the workers and the monitor share during one run.

    Built fresh by the engine for every crawl and discarded once all
    threads have joined.
    """
    seed_url: str
    frontier: Frontier = field(default_factory=Frontier)
    visited: VisitedSet = field(default_factory=VisitedSet)
    active_workers: ActiveWorkerCounter = field(default_factory=ActiveWorkerCounter)

    # Set when the user interrupts the crawl; workers drain without fetching
    aborted: threading.Event = field(default_factory=threading.Event)

    def is_idle(self) -> bool:
        """True when the queue is empty and no worker is mid-page."""
        return self.frontier.is_empty() and self.active_workers.value == 0
