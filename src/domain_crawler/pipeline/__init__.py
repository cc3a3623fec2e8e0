"""
Pipeline Framework Module

This module contains the shared crawl state and the per-page processing
chain used by the worker pool.

Components:
-----------
- Frontier: Blocking FIFO of URLs awaiting fetch, with a stop signal
- VisitedSet: Set of claimed URLs with atomic check-and-insert
- CrawlContext: Per-run container of the shared state
- CrawlWorker: The pop / claim / fetch / extract / push loop
- PipelineStage: Abstract base class for the per-page stages
- PageData: Record that flows through the stages

Usage:
------
from domain_crawler.pipeline import PipelineStage, PageData

class MyCustomStage(PipelineStage):
    def process(self, data: PageData) -> Optional[PageData]:
        # Your processing logic
        return data
"""

from .frontier import Frontier, STOP
from .visited_set import VisitedSet
from .crawl_context import CrawlContext, ActiveWorkerCounter
from .stage import PipelineStage
from .page_data import PageData
from .worker import CrawlWorker

__all__ = [
    'Frontier',
    'STOP',
    'VisitedSet',
    'CrawlContext',
    'ActiveWorkerCounter',
    'PipelineStage',
    'PageData',
    'CrawlWorker',
]
