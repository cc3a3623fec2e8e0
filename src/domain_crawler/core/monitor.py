"""
Termination Monitor - Detects the idle fixed point and stops the crawl
File: src/domain_crawler/core/monitor.py

Workers only push while counted active, and count themselves idle only
after their last push. So once the queue is empty and no worker is
active, nothing can ever be enqueued again and it is safe to stop.
"""
import logging
import threading
from typing import Callable, Optional

from ..pipeline.crawl_context import CrawlContext


class TerminationMonitor:
    """
    Polls the crawl context and broadcasts stop exactly once.

    Runs in its own thread. Besides the idle fixed point it also stops
    the crawl when no worker thread is left alive (e.g. every worker
    failed to open its fetcher), since nobody could drain the queue.
    """

    def __init__(self, context: CrawlContext, interval: float = 2.0,
                 live_workers: Optional[Callable[[], int]] = None):
        """
        Args:
            context: Shared state of the run being watched
            interval: Seconds between checks
            live_workers: Returns how many worker threads are still alive
        """
        self.context = context
        self.interval = interval
        self.live_workers = live_workers

        self.stop_event = threading.Event()
        self.polls = 0
        self.stop_requests = 0
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> None:
        """Background monitoring loop"""
        while not self.stop_event.wait(self.interval):
            self.polls += 1

            queue_empty = self.context.frontier.is_empty()
            active = self.context.active_workers.value
            alive = self.live_workers() if self.live_workers else None

            self.logger.info(
                f"Monitoring: Queue empty? {'Yes' if queue_empty else 'No'}, "
                f"Active workers: {active}, "
                f"Visited: {self.context.visited.size()}"
                + (f", Live workers: {alive}" if alive is not None else "")
            )

            if queue_empty and active == 0:
                self.logger.info("Queue empty and workers idle. Requesting stop...")
                self._request_stop()
                return

            if alive == 0:
                self.logger.error("No live workers left. Requesting stop...")
                self._request_stop()
                return

        self.logger.info("Monitoring cancelled")

    def cancel(self) -> None:
        """End the loop early without requesting a stop."""
        self.stop_event.set()

    def _request_stop(self) -> None:
        self.stop_requests += 1
        self.context.frontier.request_stop()
