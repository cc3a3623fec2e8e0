"""
Crawler Configuration Management - Centralized configuration loading and validation.
Supports loading from YAML files with validation and defaults.
"""

import logging
import yaml
from typing import Dict, Any
from pathlib import Path
from dataclasses import asdict

from ..pipeline.stages.fetch_stage import FetchConfig
from ..pipeline.stages.link_extraction_stage import LinkExtractionConfig
from ..pipeline.stages.url_resolution_stage import ResolutionConfig
from ..core.crawl_engine import CrawlerConfig

SECTIONS = ('crawler', 'fetch', 'link_extraction', 'resolution')
CRAWLER_KEYS = ('workers', 'monitor_interval_seconds')


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigLoader:
    """Loads and validates crawler configuration from YAML files."""

    @staticmethod
    def load_from_yaml(config_path: str) -> CrawlerConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CrawlerConfig object

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger = logging.getLogger(__name__)

        # Check if file exists
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        # Load YAML
        try:
            with open(path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {config_path}: {e}")

        if not config_dict:
            raise ConfigurationError(f"Empty configuration file: {config_path}")
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        logger.info(f"Loaded configuration from {config_path}")

        # Parse configuration
        try:
            return ConfigLoader._parse_config(config_dict)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse configuration: {e}")

    @staticmethod
    def _parse_config(config_dict: Dict[str, Any]) -> CrawlerConfig:
        """Parse configuration dictionary into CrawlerConfig object."""
        defaults = CrawlerConfig()
        unknown_sections = set(config_dict) - set(SECTIONS)
        if unknown_sections:
            raise ValueError(f"Unknown configuration sections: {sorted(unknown_sections)}")

        crawler = config_dict.get('crawler') or {}
        unknown = set(crawler) - set(CRAWLER_KEYS)
        if unknown:
            raise ValueError(f"Unknown keys in 'crawler': {sorted(unknown)}")

        # HTTP Fetch
        fetch_cfg = config_dict.get('fetch') or {}
        fetch = FetchConfig(**ConfigLoader._known_keys(FetchConfig, fetch_cfg, 'fetch'))

        # Link Extraction
        link_cfg = config_dict.get('link_extraction') or {}
        link_extraction = LinkExtractionConfig(
            **ConfigLoader._known_keys(LinkExtractionConfig, link_cfg, 'link_extraction')
        )

        # URL Resolution
        res_cfg = config_dict.get('resolution') or {}
        resolution = ResolutionConfig(
            **ConfigLoader._known_keys(ResolutionConfig, res_cfg, 'resolution')
        )

        return CrawlerConfig(
            fetch=fetch,
            link_extraction=link_extraction,
            resolution=resolution,
            workers=int(crawler.get('workers', defaults.workers)),
            monitor_interval_seconds=float(
                crawler.get('monitor_interval_seconds', defaults.monitor_interval_seconds)
            )
        )

    @staticmethod
    def _known_keys(config_cls, section: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        """Return the section, rejecting keys the dataclass does not declare."""
        known = set(config_cls.__dataclass_fields__)
        unknown = set(section) - known
        if unknown:
            raise ValueError(f"Unknown keys in '{section_name}': {sorted(unknown)}")
        return dict(section)

    @staticmethod
    def save_to_yaml(config: CrawlerConfig, output_path: str):
        """Save configuration to YAML file."""
        logger = logging.getLogger(__name__)

        config_dict = {
            'crawler': {
                'workers': config.workers,
                'monitor_interval_seconds': config.monitor_interval_seconds,
            },
            'fetch': asdict(config.fetch),
            'link_extraction': asdict(config.link_extraction),
            'resolution': asdict(config.resolution),
        }

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)
            logger.info(f"Configuration saved to {output_path}")
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    @staticmethod
    def create_default_config() -> CrawlerConfig:
        """Create a default configuration."""
        return CrawlerConfig(
            fetch=FetchConfig(),
            link_extraction=LinkExtractionConfig(),
            resolution=ResolutionConfig(),
            workers=4,
            monitor_interval_seconds=2.0
        )


def _check_numeric(value, name: str, integer: bool = False):
    """Reject values YAML parsed as the wrong type before comparing them."""
    expected = int if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, expected):
        kind = "an integer" if integer else "a number"
        raise ConfigurationError(f"{name} must be {kind}, got {value!r}")


def validate_config(config: CrawlerConfig) -> bool:
    """Validate crawler configuration."""
    logger = logging.getLogger(__name__)

    _check_numeric(config.workers, "workers", integer=True)
    _check_numeric(config.monitor_interval_seconds, "monitor_interval_seconds")
    _check_numeric(config.fetch.connect_timeout_seconds, "connect_timeout_seconds")
    _check_numeric(config.fetch.read_timeout_seconds, "read_timeout_seconds")
    _check_numeric(config.fetch.max_redirects, "max_redirects", integer=True)
    _check_numeric(config.fetch.max_content_size_mb, "max_content_size_mb", integer=True)
    _check_numeric(config.link_extraction.max_links_per_page, "max_links_per_page", integer=True)

    if config.workers < 1:
        raise ConfigurationError("workers must be at least 1")

    if config.monitor_interval_seconds <= 0:
        raise ConfigurationError("monitor_interval_seconds must be positive")

    if config.fetch.connect_timeout_seconds <= 0 or config.fetch.read_timeout_seconds <= 0:
        raise ConfigurationError("fetch timeouts must be positive")

    if config.fetch.max_redirects < 0:
        raise ConfigurationError("max_redirects cannot be negative")

    if config.fetch.max_content_size_mb < 1:
        raise ConfigurationError("max_content_size_mb must be at least 1")

    if config.link_extraction.max_links_per_page < 0:
        raise ConfigurationError("max_links_per_page cannot be negative")

    skip_schemes = config.resolution.skip_schemes
    if not isinstance(skip_schemes, list) or not all(isinstance(s, str) and s for s in skip_schemes):
        raise ConfigurationError("skip_schemes must be non-empty strings")

    logger.info("Configuration validated successfully")
    return True
