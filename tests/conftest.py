"""Test fixtures for the domain crawler."""

import pytest

from domain_crawler.core.crawl_engine import CrawlerConfig


@pytest.fixture
def fast_config():
    """Engine config with a short monitor interval for quick tests."""
    return CrawlerConfig(workers=3, monitor_interval_seconds=0.05)
