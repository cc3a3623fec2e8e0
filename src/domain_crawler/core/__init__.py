"""
Core Module - High-level crawler orchestration.

This module contains the crawl engine that connects the frontier, the
worker pool and the termination monitor, and provides a simple
interface for running a crawl.

Components:
-----------
- CrawlEngine: Main orchestrator for one crawl run at a time
- CrawlerConfig: Complete configuration for the engine and its stages
- CrawlResult: Summary returned when a crawl finishes
- TerminationMonitor: Stops the crawl at the idle fixed point

Usage:
------
from domain_crawler.core import CrawlEngine
from domain_crawler.config import ConfigLoader

# Load configuration
config = ConfigLoader.load_from_yaml('config/default.yaml')

# Crawl (blocks until no work is left)
engine = CrawlEngine(config)
result = engine.run('https://example.com/')

print(result.pages_visited)
"""

from .crawl_engine import CrawlEngine, CrawlerConfig, CrawlResult
from .monitor import TerminationMonitor

__all__ = [
    'CrawlEngine',
    'CrawlerConfig',
    'CrawlResult',
    'TerminationMonitor',
]
