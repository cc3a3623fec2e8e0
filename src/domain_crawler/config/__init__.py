"""
Configuration Module - YAML configuration for crawl runs.

Components:
-----------
- ConfigLoader: Reads, writes and builds default CrawlerConfig objects
- validate_config: Rejects out-of-range settings before a crawl starts
- ConfigurationError: Raised for unreadable or invalid configuration

Example file:
-------------
crawler:
  workers: 4
  monitor_interval_seconds: 2.0

fetch:
  connect_timeout_seconds: 10
  read_timeout_seconds: 20
  user_agent: MySimpleCrawler/1.0

link_extraction:
  parser: html.parser

resolution:
  strict_host_boundary: false

Every section is optional. Unknown keys are an error.
"""

from .crawler_config import ConfigLoader, validate_config, ConfigurationError

__all__ = ['ConfigLoader', 'validate_config', 'ConfigurationError']
