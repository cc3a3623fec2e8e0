"""
Link Extraction Stage - Pulls raw anchor hrefs out of fetched HTML.
Resolution against the page URL happens in the next stage.
"""

import logging
from typing import Optional, List, Protocol
from dataclasses import dataclass

from bs4 import BeautifulSoup, FeatureNotFound

from ..stage import PipelineStage
from ..page_data import PageData


class LinkExtractionError(Exception):
    """Raised when markup cannot be turned into a document tree."""
    pass


@dataclass
class LinkExtractionConfig:
    """Configuration for link extraction stage."""
    parser: str = "html.parser"  # 'html.parser', 'lxml', or 'html5lib'
    max_links_per_page: int = 1000  # Limit links per page, 0 = unlimited


class LinkExtractor(Protocol):
    """What the crawl workers need from a link extractor."""

    def extract(self, html: str) -> List[str]:
        """Return raw href values, raising LinkExtractionError on bad markup."""


class HTMLLinkExtractor:
    """Extracts href values of <a> elements with BeautifulSoup."""

    def __init__(self, config: LinkExtractionConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def extract(self, html: str) -> List[str]:
        """
        Extract raw hrefs from an HTML document.

        Returns:
            Non-empty href strings in document order (unresolved)
        """
        try:
            soup = BeautifulSoup(html, self.config.parser)
        except FeatureNotFound as e:
            raise LinkExtractionError(f"Parser '{self.config.parser}' not available: {e}") from e
        except Exception as e:
            raise LinkExtractionError(f"Failed to parse HTML: {e}") from e

        links = []
        for tag in soup.find_all('a', href=True):
            href = tag.get('href', '')
            if not isinstance(href, str) or not href.strip():
                continue
            links.append(href)

            if self.config.max_links_per_page and len(links) >= self.config.max_links_per_page:
                self.logger.warning(f"Reached max links limit ({self.config.max_links_per_page})")
                break

        return links


class LinkExtractionStage(PipelineStage):
    """
    Second stage of a worker's chain: link extraction.

    Responsibilities:
    - Hand the fetched HTML to the link extractor
    - Record the raw hrefs on the page
    - Log and skip pages whose markup cannot be handled
    """

    def __init__(self, extractor: LinkExtractor):
        super().__init__("LinkExtraction")
        self.extractor = extractor
        self.logger = logging.getLogger(self.__class__.__name__)

    def process(self, data: PageData) -> Optional[PageData]:
        if not data.raw_html:
            self.logger.debug(f"No HTML to extract links from: {data.url}")
            return None

        try:
            data.raw_links = list(self.extractor.extract(data.raw_html))
        except LinkExtractionError as e:
            data.add_error(str(e), stage=self.name)
            self.logger.error(f"Failed to parse {data.url}: {e}")
            return None

        self.logger.debug(f"Extracted {len(data.raw_links)} links from {data.url}")
        return data
