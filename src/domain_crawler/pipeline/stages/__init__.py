"""
Pipeline Stages Module

This module contains the per-page stages a crawl worker runs for every
URL it claims.

Pipeline Flow:
--------------
1. FetchStage               - Downloads the page (HTTP request)
2. LinkExtractionStage      - Extracts raw hrefs from the HTML
3. URLResolutionStage       - Resolves hrefs and keeps same-domain links

Usage:
------
from domain_crawler.pipeline.stages import (
    FetchStage,
    FetchConfig,
    HTTPFetcher,
)

fetcher = HTTPFetcher(FetchConfig(read_timeout_seconds=5))
stage = FetchStage(fetcher)
page = stage.run(PageData(url='https://example.com/'))
"""

# Stage 1: HTTP Fetch
from .fetch_stage import (
    FetchStage,
    FetchConfig,
    FetchResult,
    FetchError,
    FetcherInitError,
    Fetcher,
    HTTPFetcher,
)

# Stage 2: Link Extraction
from .link_extraction_stage import (
    LinkExtractionStage,
    LinkExtractionConfig,
    LinkExtractionError,
    LinkExtractor,
    HTMLLinkExtractor,
)

# Stage 3: URL Resolution
from .url_resolution_stage import (
    URLResolutionStage,
    ResolutionConfig,
    resolve_url,
    same_domain,
    scope_prefix,
)


__all__ = [
    # Stages
    'FetchStage',
    'LinkExtractionStage',
    'URLResolutionStage',

    # Configurations
    'FetchConfig',
    'LinkExtractionConfig',
    'ResolutionConfig',

    # Collaborators
    'Fetcher',
    'FetchResult',
    'HTTPFetcher',
    'LinkExtractor',
    'HTMLLinkExtractor',

    # Errors
    'FetchError',
    'FetcherInitError',
    'LinkExtractionError',

    # URL helpers
    'resolve_url',
    'same_domain',
    'scope_prefix',
]
