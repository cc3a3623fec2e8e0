"""
Crawl Worker - The fetch / extract / enqueue loop run by each worker thread.
"""

import logging
import threading
from typing import Optional

from .crawl_context import CrawlContext
from .frontier import STOP
from .page_data import PageData
from .stages.fetch_stage import FetchStage
from .stages.link_extraction_stage import LinkExtractionStage
from .stages.url_resolution_stage import URLResolutionStage


class CrawlWorker:
    """
    One member of the worker pool.

    Loop:
    -----
    1. Pop a URL from the frontier (blocks; STOP ends the loop)
    2. Claim it in the visited set, skip if another worker already did
    3. Count itself active, run the stages, push in-scope links
    4. Count itself idle again, only after every push has happened
    """

    def __init__(self, worker_id: int, context: CrawlContext, fetch_stage: FetchStage,
                 link_extraction_stage: LinkExtractionStage,
                 resolution_stage: URLResolutionStage):
        self.worker_id = worker_id
        self.name = f"Worker-{worker_id}"
        self.context = context
        self.fetch_stage = fetch_stage
        self.stages = [fetch_stage, link_extraction_stage, resolution_stage]
        self.logger = logging.getLogger(self.name)

        self.init_failed = False
        self.stats_lock = threading.Lock()
        self.stats = {
            'pages_processed': 0,
            'duplicates_skipped': 0,
            'aborted_skipped': 0,
            'links_enqueued': 0,
            'errors': 0,
        }

    def run(self):
        """Thread entry point."""
        self.logger.info(f"{self.name} started.")

        try:
            self.fetch_stage.open()
        except Exception as e:
            # Never counted as active, so termination is unaffected
            self.init_failed = True
            self.logger.error(f"{self.name} failed to initialize fetcher: {e}")
            return

        frontier = self.context.frontier
        while True:
            url = frontier.pop()
            if url is STOP:
                break

            if self.context.aborted.is_set():
                self._bump('aborted_skipped')
                continue

            if not self.context.visited.check_and_insert(url):
                self._bump('duplicates_skipped')
                continue

            self.context.active_workers.increment()
            try:
                self.process_url(url)
            except Exception as e:
                self._bump('errors')
                self.logger.error(f"{self.name} unexpected error on {url}: {e}", exc_info=True)
            finally:
                self.context.active_workers.decrement()

        self.logger.info(f"{self.name} finished.")

    def process_url(self, url: str) -> Optional[PageData]:
        """
        Run one claimed URL through the stages and enqueue its links.

        Returns:
            The page record if every stage passed it on, else None
        """
        data = PageData(url=url, worker_name=self.name)
        self._bump('pages_processed')

        for stage in self.stages:
            data = stage.run(data)
            if data is None:
                return None

        for link in data.links:
            self.context.frontier.push(link)

        self._bump('links_enqueued', len(data.links))
        self.logger.debug(
            f"{self.name} parsed {len(data.raw_links)} links, added {len(data.links)} from: {url}"
        )
        return data

    def _bump(self, key: str, amount: int = 1):
        with self.stats_lock:
            self.stats[key] += amount

    def get_stats(self) -> dict:
        with self.stats_lock:
            return dict(self.stats, name=self.name, init_failed=self.init_failed)

    def __repr__(self) -> str:
        return f"<CrawlWorker name='{self.name}'>"
