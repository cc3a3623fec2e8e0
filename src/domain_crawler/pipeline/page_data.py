"""
Page Data Model - Record that flows through a worker's stages
File: src/domain_crawler/pipeline/page_data.py
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict


@dataclass
class PageData:
    """
    What one worker knows about one claimed URL.

    The fetch stage fills in the response fields, link extraction the
    raw hrefs, and resolution the absolute in-scope links to enqueue.
    """
    url: str
    worker_name: Optional[str] = None

    # Set by FetchStage
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    final_url: Optional[str] = None  # After redirects
    raw_html: Optional[str] = None

    # Set by LinkExtractionStage, then URLResolutionStage
    raw_links: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    dropped_links: int = 0

    stage_timings: Dict[str, float] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def add_error(self, error: str, stage: str = "unknown") -> None:
        self.errors.append(f"[{stage}] {error}")

    def add_timing(self, stage: str, duration: float) -> None:
        self.stage_timings[stage] = duration

    def has_errors(self) -> bool:
        return bool(self.errors)

    def __repr__(self) -> str:
        return f"PageData(url='{self.url}', status={self.status_code}, links={len(self.links)})"
