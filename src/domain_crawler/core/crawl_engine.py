"""
Crawl Engine - Main orchestrator that wires the frontier, the worker pool
and the termination monitor together for one crawl run.
This is the high-level interface for running the web crawler.
"""

import logging
import threading
import time
from typing import List, Optional, FrozenSet
from dataclasses import dataclass, field

from ..pipeline.crawl_context import CrawlContext
from ..pipeline.worker import CrawlWorker
from ..pipeline.stages.fetch_stage import FetchStage, FetchConfig, Fetcher, HTTPFetcher
from ..pipeline.stages.link_extraction_stage import (
    LinkExtractionStage, LinkExtractionConfig, LinkExtractor, HTMLLinkExtractor
)
from ..pipeline.stages.url_resolution_stage import URLResolutionStage, ResolutionConfig
from .monitor import TerminationMonitor


@dataclass
class CrawlerConfig:
    """Master configuration for a crawl run."""
    # Component configurations
    fetch: FetchConfig = field(default_factory=FetchConfig)
    link_extraction: LinkExtractionConfig = field(default_factory=LinkExtractionConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)

    # Engine settings
    workers: int = 4
    monitor_interval_seconds: float = 2.0


@dataclass
class CrawlResult:
    """Summary of a finished crawl."""
    seed_url: str
    visited: FrozenSet[str]
    runtime_seconds: float
    workers_started: int
    workers_failed: int
    stop_requests: int
    monitor_polls: int
    aborted: bool = False
    worker_stats: List[dict] = field(default_factory=list)
    stage_stats: List[dict] = field(default_factory=list)

    @property
    def pages_visited(self) -> int:
        return len(self.visited)


class CrawlEngine:
    """
    Main crawler orchestrator.

    Builds a fresh CrawlContext for every run, starts the worker threads
    and the monitor, and returns once every thread has joined.
    """

    def __init__(self, config: Optional[CrawlerConfig] = None,
                 fetcher: Optional[Fetcher] = None,
                 link_extractor: Optional[LinkExtractor] = None):
        """
        Initialize crawl engine.

        Args:
            config: Crawl configuration (defaults if omitted)
            fetcher: Fetcher to use instead of the requests-based one
            link_extractor: Extractor to use instead of the BeautifulSoup one
        """
        self.config = config or CrawlerConfig()
        self.fetcher = fetcher or HTTPFetcher(self.config.fetch)
        self.link_extractor = link_extractor or HTMLLinkExtractor(self.config.link_extraction)
        self.logger = logging.getLogger(self.__class__.__name__)

        # State of the current run
        self.context: Optional[CrawlContext] = None
        self.monitor: Optional[TerminationMonitor] = None
        self.workers: List[CrawlWorker] = []
        self.threads: List[threading.Thread] = []
        self.stages = []
        self.is_running = False
        self.start_time = None
        self.run_lock = threading.Lock()

    def run(self, seed_url: str) -> CrawlResult:
        """
        Crawl every same-domain page reachable from the seed URL.

        Args:
            seed_url: Absolute http(s) URL to start from

        Returns:
            CrawlResult once all workers and the monitor have stopped

        Raises:
            ValueError: If the seed URL is not an absolute http(s) URL
            RuntimeError: If a crawl is already running on this engine
        """
        lowered = seed_url.lower()
        if not (lowered.startswith('http://') or lowered.startswith('https://')):
            raise ValueError(f"Seed URL must be an absolute http(s) URL: {seed_url}")

        with self.run_lock:
            if self.is_running:
                raise RuntimeError("Crawl already running")
            self.is_running = True

        try:
            self._build(seed_url)
            return self._execute()
        finally:
            self.is_running = False

    def _build(self, seed_url: str):
        """Create the context, stages, workers and monitor for one run."""
        self.context = CrawlContext(seed_url=seed_url)

        fetch_stage = FetchStage(self.fetcher)
        link_stage = LinkExtractionStage(self.link_extractor)
        resolution_stage = URLResolutionStage(self.config.resolution, reference_url=seed_url)
        self.stages = [fetch_stage, link_stage, resolution_stage]

        self.workers = [
            CrawlWorker(i, self.context, fetch_stage, link_stage, resolution_stage)
            for i in range(self.config.workers)
        ]
        self.threads = [
            threading.Thread(target=worker.run, name=worker.name, daemon=True)
            for worker in self.workers
        ]
        self.monitor = TerminationMonitor(
            self.context,
            interval=self.config.monitor_interval_seconds,
            live_workers=self._live_worker_count
        )

    def _execute(self) -> CrawlResult:
        context = self.context
        self.start_time = time.time()

        context.frontier.push(context.seed_url)
        self.logger.info(f"Injected seed URL: {context.seed_url}")

        self.logger.info(f"Launching {len(self.threads)} worker threads...")
        for thread in self.threads:
            thread.start()

        monitor_thread = threading.Thread(
            target=self.monitor.run,
            name="crawl-monitor",
            daemon=True
        )
        monitor_thread.start()
        try:
            monitor_thread.join()
        except KeyboardInterrupt:
            self.logger.warning("Crawl interrupted by user")
            self.abort()
            monitor_thread.join()

        self.logger.info("Waiting for workers to join...")
        for thread in self.threads:
            thread.join()

        self.fetcher.close()

        runtime = time.time() - self.start_time
        result = CrawlResult(
            seed_url=context.seed_url,
            visited=context.visited.snapshot(),
            runtime_seconds=runtime,
            workers_started=len(self.workers),
            workers_failed=sum(1 for w in self.workers if w.init_failed),
            stop_requests=self.monitor.stop_requests,
            monitor_polls=self.monitor.polls,
            aborted=context.aborted.is_set(),
            worker_stats=[w.get_stats() for w in self.workers],
            stage_stats=[s.get_stats() for s in self.stages],
        )
        self.logger.info(
            f"Crawl finished: {result.pages_visited} unique pages in {runtime:.2f}s"
        )
        return result

    def abort(self):
        """
        Stop the running crawl early (e.g. on Ctrl-C).

        In-flight fetches still complete; every other queued URL is
        dropped and workers exit at their next pop.
        """
        context = self.context
        if context is None or not self.is_running:
            self.logger.warning("Crawler not running")
            return

        self.logger.info("Aborting crawl...")
        context.aborted.set()
        self.monitor.cancel()
        context.frontier.clear()
        context.frontier.request_stop()

    def _live_worker_count(self) -> int:
        return sum(1 for thread in self.threads if thread.is_alive())

    def get_status(self) -> dict:
        """
        Get current crawler status.

        Returns:
            dict with status information
        """
        context = self.context
        status = {
            'is_running': self.is_running,
            'runtime_seconds': time.time() - self.start_time if self.start_time else 0,
            'queue_size': context.frontier.size() if context else 0,
            'active_workers': context.active_workers.value if context else 0,
            'live_workers': self._live_worker_count(),
            'visited': context.visited.size() if context else 0,
            'stages': [stage.get_stats() for stage in self.stages],
        }
        return status

    def print_status(self):
        """Print a formatted status summary."""
        status = self.get_status()

        print("\n" + "="*60)
        print("CRAWLER STATUS")
        print("="*60)
        print(f"Running: {status['is_running']}")
        print(f"Runtime: {status['runtime_seconds']:.2f} seconds")
        print(f"Pages Visited: {status['visited']}")
        print(f"Queue Size: {status['queue_size']}")
        print(f"Active Workers: {status['active_workers']} / {status['live_workers']} live")

        print("\nStage Status:")
        print("-"*60)
        for stage_stat in status['stages']:
            print(f"  {stage_stat['name']:25} | "
                  f"Processed: {stage_stat['processed']:6} | "
                  f"Dropped: {stage_stat['dropped']:6} | "
                  f"Errors: {stage_stat['errors']:4}")

        print("="*60 + "\n")
