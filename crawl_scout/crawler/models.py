# crawl_scout/crawler/models.py
"""
Data models for the CrawlScout crawler and scraper.

Reports serialize to the camelCase JSON shape served by the HTTP API;
optional fields that were never set are omitted rather than sent as ``null``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

NON_HTML_ERROR = "Skipped non-HTML response"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass(slots=True)
class FetchSuccess:
    """A completed 2xx response. ``body`` is empty unless the response is HTML."""

    url: str
    status: int
    content_type: str
    body: str = ""

    ok = True

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


@dataclass(slots=True)
class FetchFailure:
    """A request that produced no usable response; ``error`` is human readable."""

    url: str
    error: str

    ok = False


FetchResult = Union[FetchSuccess, FetchFailure]


@dataclass(slots=True, frozen=True)
class FrontierEntry:
    """A pending crawl target and its distance from the start URL."""

    url: str
    depth: int


@dataclass(slots=True)
class PageReport:
    """Per-URL result of a crawl."""

    url: str
    status: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    links: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def fetch_failed(self) -> bool:
        """True when the page could not be fetched at all (no HTTP status)."""
        return self.error is not None and self.status is None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "url": self.url,
                "status": self.status,
                "title": self.title,
                "description": self.description,
                "links": list(self.links),
                "error": self.error,
            }
        )


@dataclass(slots=True)
class ScrapeReport(PageReport):
    """Single-page report: the crawl fields plus Open Graph data, headings and a preview."""

    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    text_preview: Optional[str] = None
    headings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "url": self.url,
                "status": self.status,
                "title": self.title,
                "description": self.description,
                "ogTitle": self.og_title,
                "ogDescription": self.og_description,
                "ogImage": self.og_image,
                "textPreview": self.text_preview,
                "headings": list(self.headings),
                "links": list(self.links),
                "error": self.error,
            }
        )


@dataclass(slots=True)
class CrawlResult:
    """The request echo plus every page report, in visitation order."""

    start_url: str
    max_pages: int
    max_depth: int
    same_domain: bool
    pages: List[PageReport] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startUrl": self.start_url,
            "maxPages": self.max_pages,
            "maxDepth": self.max_depth,
            "sameDomain": self.same_domain,
            "pages": [page.to_dict() for page in self.pages],
        }
