"""
Pipeline Stage - Base class for the per-page processing steps.

A worker thread carries each claimed URL through a short chain of stages
(fetch, link extraction, link resolution). Every stage returns the page
record to continue the chain or None to end it for that page.
"""

import threading
import logging
import time
from typing import Optional
from abc import ABC, abstractmethod

from .page_data import PageData


class PipelineStage(ABC):
    """
    One step of a worker's chain.

    Stages hold no per-page state, so one instance is shared by every
    worker thread. Counters are guarded by stats_lock.
    """

    def __init__(self, name: str):
        """
        Args:
            name: Stage name used in logs, errors and stats
        """
        self.name = name

        self.processed_count = 0
        self.dropped_count = 0
        self.error_count = 0
        self.total_processing_time = 0.0
        self.stats_lock = threading.Lock()

        self.logger = logging.getLogger(f"{self.__class__.__name__}:{self.name}")

    @abstractmethod
    def process(self, data: PageData) -> Optional[PageData]:
        """
        Handle one page.

        Returns:
            The record for the next stage, or None to stop here
        """

    def run(self, data: PageData) -> Optional[PageData]:
        """
        Call process() with timing and stats.

        Unexpected exceptions are logged and turned into None so that a
        single page can never take down the calling worker.
        """
        worker_name = threading.current_thread().name
        started = time.time()
        try:
            result = self.process(data)
        except Exception as e:
            with self.stats_lock:
                self.error_count += 1
            data.add_error(str(e), stage=self.name)
            self.logger.error(f"{worker_name} error processing {data.url}: {e}", exc_info=True)
            return None

        elapsed = time.time() - started
        data.add_timing(self.name, elapsed)

        with self.stats_lock:
            self.processed_count += 1
            self.total_processing_time += elapsed
            if result is None:
                self.dropped_count += 1

        self.logger.debug(f"{worker_name} processed {data.url} in {elapsed:.3f}s")
        return result

    def get_stats(self) -> dict:
        with self.stats_lock:
            average = (self.total_processing_time / self.processed_count
                       if self.processed_count else 0.0)
            return {
                'name': self.name,
                'processed': self.processed_count,
                'dropped': self.dropped_count,
                'errors': self.error_count,
                'avg_processing_time_seconds': round(average, 3),
            }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name='{self.name}'>"
