# crawl_scout/crawler/link_extractor.py
"""
Outbound link extraction for CrawlScout.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag

from crawl_scout.utils import normalize_url, remove_duplicates, to_absolute_url

MAX_LINKS = 50


def extract_links(soup: BeautifulSoup, base_url: str, limit: int = MAX_LINKS) -> List[str]:
    """
    Absolute, normalized links from the first *limit* ``<a href>`` tags.

    Links are resolved against *base_url*; a link that cannot be normalized is
    kept in its absolute form. Duplicates are dropped keeping first-seen order.
    No scheme or host filtering happens here, the crawler decides what to follow.
    """
    links: List[str] = []
    for tag in soup.find_all("a", href=True, limit=limit):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        absolute = to_absolute_url(href_val, base_url)
        if absolute is None:
            continue
        links.append(normalize_url(absolute) or absolute)
    return remove_duplicates(links)[:limit]
