"""
Domain Crawler - A multi-threaded, single-site web crawler built with Python.

Features:
- Fixed pool of worker threads sharing one blocking frontier
- Exactly-once fetching through an atomic visited set
- Same-domain scoping of discovered links
- Automatic termination once no work can appear anymore
- Configurable via YAML
"""

__version__ = "1.0.0"

from .core.crawl_engine import CrawlEngine, CrawlerConfig, CrawlResult
from .config.crawler_config import ConfigLoader, validate_config, ConfigurationError
from .pipeline.page_data import PageData

__all__ = [
    'CrawlEngine',
    'CrawlerConfig',
    'CrawlResult',
    'ConfigLoader',
    'validate_config',
    'ConfigurationError',
    'PageData',
]
