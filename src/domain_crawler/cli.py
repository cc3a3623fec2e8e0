"""
Command Line Interface for the Domain Crawler.

Crawls every page reachable from a start URL on the same site using a
fixed pool of worker threads, then prints the number of unique pages.

Usage Examples:
--------------

# Basic crawl with 4 worker threads
python -m domain_crawler.cli https://example.com 4

# Crawl with a YAML configuration file
python -m domain_crawler.cli https://example.com 8 -c config/crawler.yaml

# Only accept links whose authority matches the seed exactly
python -m domain_crawler.cli https://example.com 4 --strict-domain

# Verbose logging, also written to a file
python -m domain_crawler.cli -v https://example.com 4 --log-file logs/crawler.log
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.crawl_engine import CrawlEngine
from .config.crawler_config import ConfigLoader, validate_config, ConfigurationError


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """
    Setup logging configuration.

    Args:
        verbose: Enable debug-level logging if True
        log_file: Also write log records to this file
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    # Set third-party loggers to WARNING to reduce noise
    if not verbose:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)


def positive_int(value: str) -> int:
    """argparse type for the worker-thread count."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid thread count: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"thread count must be a positive integer, got {number}")
    return number


def http_url(value: str) -> str:
    """argparse type for the start URL."""
    lowered = value.lower()
    if not (lowered.startswith('http://') or lowered.startswith('https://')):
        raise argparse.ArgumentTypeError(f"start URL must be an absolute http(s) URL: {value!r}")
    return value


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='domain-crawler',
        description='Domain Crawler - crawl every page of one site with a pool of threads',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s https://example.com 4
  %(prog)s https://example.com 8 -c config/crawler.yaml
  %(prog)s https://example.com 4 --strict-domain
        """
    )

    parser.add_argument(
        'start_url',
        type=http_url,
        help='Absolute http(s) URL to start crawling from'
    )

    parser.add_argument(
        'threads',
        type=positive_int,
        help='Number of worker threads (positive integer)'
    )

    parser.add_argument(
        '-c', '--config',
        help='Path to YAML configuration file (default: use built-in defaults)'
    )

    parser.add_argument(
        '--interval',
        type=positive_float,
        metavar='SECONDS',
        help='Seconds between termination checks'
    )

    parser.add_argument(
        '--strict-domain',
        action='store_true',
        help='Require links to match the seed authority exactly (not just as a prefix)'
    )

    parser.add_argument(
        '--log-file',
        metavar='FILE',
        help='Also write logs to this file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose (debug) logging'
    )

    return parser


def crawl_command(args) -> int:
    """
    Execute a crawl.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    logger = logging.getLogger(__name__)

    try:
        if args.config:
            logger.info(f"Loading configuration from {args.config}")
            config = ConfigLoader.load_from_yaml(args.config)
        else:
            config = ConfigLoader.create_default_config()

        # Override with command line arguments
        config.workers = args.threads
        if args.interval is not None:
            config.monitor_interval_seconds = args.interval
        if args.strict_domain:
            config.resolution.strict_host_boundary = True

        validate_config(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    engine = CrawlEngine(config)
    result = engine.run(args.start_url)

    print("\n--- Crawling Finished ---")
    print(f"Total unique pages visited: {result.pages_visited}")

    if result.aborted:
        logger.warning("Crawl was interrupted; results are partial")
        return EXIT_INTERRUPTED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    return crawl_command(args)


if __name__ == '__main__':
    sys.exit(main())
