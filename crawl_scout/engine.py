# File: crawl_scout/engine.py
"""crawl_scout.engine: Orchestration layer: запуск обхода/скрейпа и сборка итогового CrawlResult."""

from __future__ import annotations

import asyncio
from typing import Optional

from crawl_scout.config import CrawlRequest, FetcherConfig
from crawl_scout.crawler.crawler import crawl
from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.crawler.models import CrawlResult, ScrapeReport
from crawl_scout.logger import logger
from crawl_scout.scanner import scrape

__all__ = ["Engine", "run_crawl", "run_scrape"]


async def run_crawl(fetcher: Fetcher, request: CrawlRequest) -> CrawlResult:
    """Запускает обход по проверенному CrawlRequest и оборачивает страницы в CrawlResult."""
    pages = await crawl(
        fetcher,
        request.url,
        max_pages=request.max_pages,
        max_depth=request.max_depth,
        same_domain=request.same_domain,
    )
    return CrawlResult(
        start_url=request.url,
        max_pages=request.max_pages,
        max_depth=request.max_depth,
        same_domain=request.same_domain,
        pages=pages,
    )


async def run_scrape(fetcher: Fetcher, url: str) -> ScrapeReport:
    return await scrape(fetcher, url)


class Engine:
    """Фасад для CLI: открывает собственную HTTP-сессию на каждый запуск."""

    def __init__(self, config: Optional[FetcherConfig] = None) -> None:
        self.config = config or FetcherConfig()

    async def crawl(self, request: CrawlRequest) -> CrawlResult:
        async with Fetcher(self.config) as fetcher:
            return await run_crawl(fetcher, request)

    async def scrape(self, url: str) -> ScrapeReport:
        async with Fetcher(self.config) as fetcher:
            return await run_scrape(fetcher, url)

    def start_crawl(self, request: CrawlRequest) -> CrawlResult:
        """Синхронная обёртка над :meth:`crawl` для командной строки."""
        logger.info("Starting crawl of %s", request.url)
        return asyncio.run(self.crawl(request))

    def start_scrape(self, url: str) -> ScrapeReport:
        """Синхронная обёртка над :meth:`scrape` для командной строки."""
        logger.info("Starting scrape of %s", url)
        return asyncio.run(self.scrape(url))
