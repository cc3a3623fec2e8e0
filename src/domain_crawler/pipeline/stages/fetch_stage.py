"""
HTTP Fetch Stage - Downloads pages for the crawl workers.

Each worker thread gets its own requests.Session, opened when the worker
starts. Transport failures are reported as FetchError and never retried.
"""

import logging
import time
import threading
from typing import Optional, Dict, Protocol
from dataclasses import dataclass, field

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException

from ..stage import PipelineStage
from ..page_data import PageData


class FetchError(Exception):
    """Raised when a URL cannot be retrieved (DNS, connect, TLS, timeout...)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class FetcherInitError(Exception):
    """Raised when a worker thread cannot set up its fetcher resources."""
    pass


@dataclass
class FetchConfig:
    """Configuration for HTTP fetch stage."""
    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 20.0
    max_redirects: int = 5
    verify_ssl: bool = True
    ca_bundle: Optional[str] = None  # Path to CA bundle, None = certifi default
    user_agent: str = "MySimpleCrawler/1.0"
    max_content_size_mb: int = 10  # Abort bodies larger than this

    # Request headers
    accept_language: str = "en-US,en;q=0.9"
    accept_encoding: str = "gzip, deflate"

    # Connection pooling
    pool_connections: int = 10
    pool_maxsize: int = 20


@dataclass
class FetchResult:
    """Outcome of a completed HTTP exchange (any status code)."""
    url: str
    status_code: int
    content_type: str
    body: bytes
    final_url: str
    headers: Dict[str, str] = field(default_factory=dict)
    response_time: float = 0.0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_html(self) -> bool:
        return 'text/html' in (self.content_type or '').lower()


class Fetcher(Protocol):
    """What the crawl workers need from a fetcher."""

    def open(self) -> None:
        """Prepare resources for the calling thread."""

    def fetch(self, url: str) -> FetchResult:
        """Retrieve a URL, raising FetchError on transport failure."""

    def close(self) -> None:
        """Release all resources."""


class SessionManager:
    """Keeps one requests.Session per worker thread."""

    def __init__(self, config: FetchConfig):
        self.config = config
        self.sessions: Dict[int, requests.Session] = {}
        self.lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_session(self) -> requests.Session:
        thread_id = threading.get_ident()
        with self.lock:
            if thread_id not in self.sessions:
                self.sessions[thread_id] = self._create_session()
            return self.sessions[thread_id]

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # No retries: a failed fetch is logged and the URL is given up on
        adapter = HTTPAdapter(max_retries=0,
                              pool_connections=self.config.pool_connections,
                              pool_maxsize=self.config.pool_maxsize)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.max_redirects = self.config.max_redirects
        if self.config.verify_ssl and self.config.ca_bundle:
            session.verify = self.config.ca_bundle
        else:
            session.verify = self.config.verify_ssl
        session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': self.config.accept_language,
            'Accept-Encoding': self.config.accept_encoding,
            'Connection': 'keep-alive',
        })
        return session

    def close_all(self):
        with self.lock:
            for session in self.sessions.values():
                session.close()
            self.sessions.clear()


class HTTPFetcher:
    """Fetches pages with requests, one session per calling thread."""

    def __init__(self, config: FetchConfig, session_manager: Optional[SessionManager] = None):
        self.config = config
        self.session_manager = session_manager or SessionManager(config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def open(self) -> None:
        try:
            self.session_manager.get_session()
        except Exception as e:
            raise FetcherInitError(f"Could not create HTTP session: {e}") from e

    def fetch(self, url: str) -> FetchResult:
        session = self.session_manager.get_session()
        start_time = time.time()
        max_bytes = self.config.max_content_size_mb * 1024 * 1024

        try:
            response = session.get(
                url,
                timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                allow_redirects=True,
                stream=True
            )
        except RequestException as e:
            raise FetchError(url, f"Request Error: {e}") from e

        try:
            content_length = response.headers.get('Content-Length')
            if content_length and content_length.isdigit() and int(content_length) > max_bytes:
                raise FetchError(url, "Content too large")

            content = bytearray()
            for chunk in response.iter_content(chunk_size=8192):
                content.extend(chunk)
                if len(content) > max_bytes:
                    raise FetchError(url, "Content exceeded size limit")
        except RequestException as e:
            raise FetchError(url, f"Read Error: {e}") from e
        finally:
            response.close()

        return FetchResult(
            url=url,
            status_code=response.status_code,
            content_type=response.headers.get('Content-Type', ''),
            body=bytes(content),
            final_url=response.url,
            headers=dict(response.headers),
            response_time=time.time() - start_time,
        )

    def close(self) -> None:
        self.session_manager.close_all()


class FetchStage(PipelineStage):
    """
    First stage of a worker's chain: HTTP fetch.

    Passes a page on only when the response is 2xx HTML.
    """

    def __init__(self, fetcher: Fetcher):
        super().__init__("HTTPFetch")
        self.fetcher = fetcher
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stats = {
            'total_fetched': 0, 'successful': 0, 'failed': 0,
            'non_html': 0, 'http_errors': {},
            'total_bytes': 0, 'total_response_time': 0.0,
        }

    def open(self) -> None:
        """Set up fetcher resources for the calling worker thread."""
        self.fetcher.open()

    def process(self, data: PageData) -> Optional[PageData]:
        url = data.url
        self.logger.debug(f"Fetching: {url}")

        try:
            result = self.fetcher.fetch(url)
        except FetchError as e:
            with self.stats_lock:
                self.stats['total_fetched'] += 1
                self.stats['failed'] += 1
            data.add_error(f"Fetch failed: {e.reason}", stage=self.name)
            self.logger.warning(f"Failed to fetch {url}: {e.reason}")
            return None

        with self.stats_lock:
            self.stats['total_fetched'] += 1
            self.stats['total_response_time'] += result.response_time
            self.stats['total_bytes'] += len(result.body)

        data.status_code = result.status_code
        data.content_type = result.content_type
        data.final_url = result.final_url

        if not result.is_success:
            with self.stats_lock:
                self.stats['http_errors'][result.status_code] = \
                    self.stats['http_errors'].get(result.status_code, 0) + 1
            self.logger.debug(f"Skipping {url}: HTTP {result.status_code}")
            return None

        if not result.is_html:
            with self.stats_lock:
                self.stats['non_html'] += 1
            self.logger.debug(f"Skipping non-HTML content ({result.content_type or 'N/A'}): {url}")
            return None

        data.raw_html = result.body.decode("utf-8", errors="replace")

        with self.stats_lock:
            self.stats['successful'] += 1

        self.logger.info(f"Fetched: {url} ({len(result.body)}b, {result.response_time:.2f}s)")
        return data

    def close(self) -> None:
        """Release fetcher resources."""
        self.fetcher.close()
        self.logger.info("Fetch stage resources released.")

    def get_stats(self) -> dict:
        stats = super().get_stats()
        with self.stats_lock:
            stats['fetch_stats'] = dict(self.stats, http_errors=dict(self.stats['http_errors']))
        return stats
