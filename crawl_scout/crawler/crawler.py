# === FILE: crawl_scout/crawler/crawler.py ===
from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Set
from urllib.parse import SplitResult, urlsplit

from crawl_scout.config import MAX_DEPTH, MAX_PAGES, MIN_DEPTH, MIN_PAGES
from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.crawler.models import NON_HTML_ERROR, FetchResult, FrontierEntry, PageReport
from crawl_scout.logger import logger
from crawl_scout.parser.html_parser import parse_summary
from crawl_scout.utils import InvalidUrlError, clamp, is_same_domain, normalize_url

__all__ = ("CrawlState", "crawl", "build_page_report")


def build_page_report(url: str, result: FetchResult) -> PageReport:
    """Crawl-shaped report for one fetch: title, description and links only."""
    if not result.ok:
        return PageReport(url=url, error=result.error)
    if not result.is_html:
        return PageReport(url=url, status=result.status, error=NON_HTML_ERROR)
    parsed = parse_summary(result.body, url)
    return PageReport(
        url=url,
        status=result.status,
        title=parsed.title,
        description=parsed.description,
        links=parsed.links,
    )


@dataclass
class CrawlState:
    """
    Breadth-first crawl in progress: FIFO frontier, visited set and reports so far.

    The state does no I/O. A driver takes :meth:`next_entry`, fetches it and
    hands the result to :meth:`record` until :attr:`done`.
    """

    origin: SplitResult
    max_pages: int
    max_depth: int
    same_domain: bool = True
    frontier: Deque[FrontierEntry] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    pages: List[PageReport] = field(default_factory=list)

    @classmethod
    def start(
        cls,
        start_url: str,
        max_pages: int = 5,
        max_depth: int = 1,
        same_domain: bool = True,
    ) -> CrawlState:
        """Seed a crawl at *start_url*; out-of-range bounds are pinned to the nearest limit."""
        if normalize_url(start_url) is None:
            raise InvalidUrlError(f"Invalid start URL: {start_url!r}")
        state = cls(
            origin=urlsplit(start_url.strip()),
            max_pages=clamp(int(max_pages), MIN_PAGES, MAX_PAGES),
            max_depth=clamp(int(max_depth), MIN_DEPTH, MAX_DEPTH),
            same_domain=bool(same_domain),
        )
        state.frontier.append(FrontierEntry(start_url, 0))
        return state

    @property
    def done(self) -> bool:
        return not self.frontier or len(self.pages) >= self.max_pages

    def next_entry(self) -> Optional[FrontierEntry]:
        """
        Dequeue the head of the frontier and claim it.

        Returns the entry with its normalized URL, or None when the head is
        unparseable or already visited (a skip, not the end of the crawl).
        """
        current = self.frontier.popleft()
        normalized = normalize_url(current.url)
        if normalized is None or normalized in self.visited:
            return None
        self.visited.add(normalized)
        return FrontierEntry(normalized, current.depth)

    def record(self, entry: FrontierEntry, result: FetchResult) -> PageReport:
        """Append the report for *entry* and enqueue its successors (HTML pages only)."""
        page = build_page_report(entry.url, result)
        self.pages.append(page)

        if not result.ok or not result.is_html:
            return page

        next_depth = entry.depth + 1
        if next_depth > self.max_depth:
            return page
        for link in page.links:
            if self.same_domain and not is_same_domain(link, self.origin):
                continue
            if link in self.visited:
                continue
            self.frontier.append(FrontierEntry(link, next_depth))
        return page


async def crawl(
    fetcher: Fetcher,
    start_url: str,
    max_pages: int = 5,
    max_depth: int = 1,
    same_domain: bool = True,
) -> List[PageReport]:
    """
    Breadth-first crawl from *start_url*, one page at a time.

    Per-page failures become reports; only an unparseable *start_url* raises
    (InvalidUrlError).
    """
    state = CrawlState.start(start_url, max_pages, max_depth, same_domain)
    logger.info(
        "Crawl started: %s (max_pages=%d, max_depth=%d, same_domain=%s)",
        start_url, state.max_pages, state.max_depth, state.same_domain,
    )
    started = time.monotonic()
    while not state.done:
        entry = state.next_entry()
        if entry is None:
            continue
        result = await fetcher.fetch(entry.url)
        page = state.record(entry, result)
        logger.debug("Visited %s (depth %d): %s", entry.url, entry.depth, page.error or page.status)

    duration = time.monotonic() - started
    logger.info("Crawl finished: %d pages in %.2f s", len(state.pages), duration)
    return state.pages
