"""
URL Resolution Stage - Turns raw hrefs into absolute, in-scope URLs
File: src/domain_crawler/pipeline/stages/url_resolution_stage.py

Resolution is purely textual: the base URL is split on its "//" marker
and first path slash rather than parsed, and the scope check is a
string-prefix test against the seed's scheme+authority.
"""
from typing import Optional, List, Sequence
from dataclasses import dataclass
import logging
from ..stage import PipelineStage
from ..page_data import PageData


DEFAULT_SKIP_SCHEMES = [
    'javascript:', 'mailto:', 'tel:', 'data:',
    'ftp:', 'file:', 'about:'
]

# Characters allowed right after the scope prefix in strict mode
_AUTHORITY_TERMINATORS = ('/', '?', '#')


@dataclass
class ResolutionConfig:
    """Configuration for URL resolution stage"""
    skip_schemes: List[str] = None
    strict_host_boundary: bool = False  # False = literal "starts with" scope test

    def __post_init__(self):
        if self.skip_schemes is None:
            self.skip_schemes = list(DEFAULT_SKIP_SCHEMES)


def resolve_url(base: str, raw_href: str,
                skip_schemes: Sequence[str] = DEFAULT_SKIP_SCHEMES) -> Optional[str]:
    """
    Resolve a raw href against the URL of the page it was found on.

    Args:
        base: Absolute URL of the containing page
        raw_href: href value as it appeared in the markup
        skip_schemes: Pseudo-scheme prefixes that are never fetchable

    Returns:
        Absolute URL, or None if the link is not crawlable or the base
        URL has no "//" marker
    """
    if raw_href is None:
        return None
    href = raw_href.strip()
    if not href:
        return None

    lowered = href.lower()
    if any(lowered.startswith(scheme) for scheme in skip_schemes):
        return None
    if '#' in href:
        return None

    if lowered.startswith('http://') or lowered.startswith('https://'):
        return href

    # Scheme-relative: borrow the base's scheme
    if href.startswith('//'):
        colon = base.find(':')
        if colon == -1:
            return None
        return base[:colon + 1] + href

    marker = base.find('//')
    if marker == -1:
        return None

    # Root-relative: keep scheme+authority only
    if href.startswith('/'):
        authority_end = base.find('/', marker + 2)
        if authority_end == -1:
            return base + href
        return base[:authority_end] + href

    # Path-relative: replace the last path segment
    last_slash = base.rfind('/')
    if last_slash > marker + 1:
        return base[:last_slash + 1] + href
    return base + '/' + href


def scope_prefix(url: str) -> Optional[str]:
    """
    Get the scheme+authority text of a URL.

    "https://example.com/a/b" -> "https://example.com"
    """
    marker = url.find('//')
    if marker == -1:
        return None
    authority_end = url.find('/', marker + 2)
    if authority_end == -1:
        return url
    return url[:authority_end]


def same_domain(candidate: str, reference: str, strict: bool = False) -> bool:
    """
    Check whether a resolved URL belongs to the reference URL's site.

    The default test is a literal prefix match, so
    "https://example.com.evil.net/" passes for "https://example.com".
    With strict=True the prefix must end at an authority boundary.
    """
    prefix = scope_prefix(reference)
    if prefix is None or not candidate.startswith(prefix):
        return False
    if not strict:
        return True

    rest = candidate[len(prefix):]
    return not rest or rest.startswith(_AUTHORITY_TERMINATORS)


class URLResolutionStage(PipelineStage):
    """
    Third stage of a worker's chain - resolves and scopes discovered links

    Responsibilities:
    - Resolve each raw href against the page URL
    - Silently drop hrefs that cannot be resolved
    - Drop links outside the seed's scheme+authority
    """

    def __init__(self, config: ResolutionConfig, reference_url: str):
        super().__init__(name="URL_Resolution")
        self.config = config
        self.reference_url = reference_url
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stats = {
            'links_seen': 0,
            'links_resolved': 0,
            'links_unresolvable': 0,
            'links_out_of_scope': 0,
        }

        self.logger.info(
            f"Scoping crawl to {scope_prefix(reference_url)!r} "
            f"(strict={config.strict_host_boundary})"
        )

    def resolve(self, base: str, raw_href: str) -> Optional[str]:
        return resolve_url(base, raw_href, self.config.skip_schemes)

    def in_scope(self, url: str) -> bool:
        return same_domain(url, self.reference_url, strict=self.config.strict_host_boundary)

    def process(self, data: PageData) -> Optional[PageData]:
        """Resolve raw links of a page and keep the in-scope ones"""
        unresolvable = 0
        out_of_scope = 0

        for raw_href in data.raw_links:
            resolved = self.resolve(data.url, raw_href)
            if resolved is None:
                unresolvable += 1
                continue
            if not self.in_scope(resolved):
                out_of_scope += 1
                self.logger.debug(f"Out of scope: {resolved}")
                continue
            data.links.append(resolved)

        data.dropped_links = unresolvable + out_of_scope

        with self.stats_lock:
            self.stats['links_seen'] += len(data.raw_links)
            self.stats['links_resolved'] += len(data.links)
            self.stats['links_unresolvable'] += unresolvable
            self.stats['links_out_of_scope'] += out_of_scope

        return data

    def get_stats(self) -> dict:
        stats = super().get_stats()
        with self.stats_lock:
            stats['resolution_stats'] = dict(self.stats)
        return stats
