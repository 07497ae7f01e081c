# crawl_scout/__init__.py
"""
CrawlScout package initializer.
Defines package version and exposes the crawl/scrape operations.
"""
__version__ = "0.1.0"

from crawl_scout.crawler.crawler import crawl
from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.scanner import scrape

__all__ = ["__version__", "Fetcher", "crawl", "scrape"]
