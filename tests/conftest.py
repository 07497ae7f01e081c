# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Union

import pytest
from aiohttp import web

from crawl_scout.config import FetcherConfig
from crawl_scout.crawler.models import FetchFailure, FetchResult, FetchSuccess

HTML_TYPE = "text/html; charset=utf-8"


class FakeFetcher:
    """
    In-memory stand-in for Fetcher.

    ``pages`` maps a URL to HTML text (served as a 200 text/html response) or
    to a ready FetchResult. Unknown URLs fail like an unresolvable host.
    """

    def __init__(self, pages: Dict[str, Union[str, FetchResult]]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch(self, url: str, *, timeout: Optional[float] = None) -> FetchResult:
        self.calls.append(url)
        entry = self.pages.get(url)
        if entry is None:
            return FetchFailure(url, f"getaddrinfo ENOTFOUND {url}")
        if isinstance(entry, str):
            return FetchSuccess(url, 200, HTML_TYPE, entry)
        return entry


def links_page(*hrefs: str, title: str = "") -> str:
    """Minimal HTML document with one anchor per href."""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return f"<html><head><title>{title}</title></head><body>{anchors}</body></html>"


async def serve_app(app: web.Application, port: int, **runner_kwargs) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app, **runner_kwargs)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def fast_config() -> FetcherConfig:
    """Fetcher settings with a short timeout for local test servers."""
    return FetcherConfig(timeout=0.5, max_redirects=5, user_agent="TestAgent/1.0")
