# === FILE: crawl_scout/parser/html_parser.py ===
"""HTML metadata extraction for CrawlScout.

:func:`parse_html` turns raw markup into a :class:`ParsedPage`:

* title — text of the first ``<title>``.
* description, og_title, og_description, og_image — ``<meta>`` content,
  looked up by ``name=`` first and ``property=`` second.
* headings — first 20 ``<h1>``/``<h2>``/``<h3>`` texts, empty ones skipped.
* text_preview — first paragraph longer than 40 characters, cut to 280.
* links — absolute outbound links (see
  :func:`crawl_scout.crawler.link_extractor.extract_links`).

Markup is parsed with the ``lxml`` backend, which closes implied end tags the
way browsers do (``<p>one<p>two`` is two paragraphs). Every field is extracted
independently: a field that cannot be read comes back empty instead of failing
the whole page.

The scraper uses :func:`parse_html`. The crawler uses :func:`parse_summary`:
title, links and the ``<meta name="description">`` tag only, without the
``property=`` fallback.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Optional, TypeVar, Union

from bs4 import BeautifulSoup

from crawl_scout.crawler.link_extractor import extract_links
from crawl_scout.logger import logger

__all__: Sequence[str] = ("ParsedPage", "parse_document", "parse_html", "parse_summary")

MAX_HEADINGS = 20
PREVIEW_MIN_LENGTH = 40
PREVIEW_MAX_LENGTH = 280

_T = TypeVar("_T")


@dataclass(slots=True)
class ParsedPage:
    """Everything the extractor could read from one HTML document."""

    title: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    text_preview: Optional[str] = None
    headings: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def extract_title(soup: BeautifulSoup) -> Optional[str]:
    tag = soup.find("title")
    text = tag.get_text().strip() if tag is not None else ""
    return text or None


def extract_meta(soup: BeautifulSoup, key: str, attrs: Sequence[str] = ("name", "property")) -> Optional[str]:
    """``content`` of the first ``<meta attr=key>``, trying *attrs* in order."""
    for attr in attrs:
        tag = soup.find("meta", attrs={attr: key})
        if tag is None:
            continue
        content = tag.get("content")
        if isinstance(content, str) and content:
            return content
    return None


def extract_headings(soup: BeautifulSoup, limit: int = MAX_HEADINGS) -> list[str]:
    headings: list[str] = []
    for tag in soup.find_all(["h1", "h2", "h3"], limit=limit):
        text = tag.get_text().strip()
        if text:
            headings.append(text)
    return headings


def extract_text_preview(soup: BeautifulSoup) -> Optional[str]:
    for tag in soup.find_all("p"):
        text = tag.get_text().strip()
        if len(text) > PREVIEW_MIN_LENGTH:
            return text[:PREVIEW_MAX_LENGTH]
    return None


def _best_effort(step: Callable[[BeautifulSoup], _T], soup: BeautifulSoup, default: _T) -> _T:
    try:
        return step(soup)
    except Exception as exc:  # pragma: no cover - bs4 tolerates almost anything
        logger.debug("Extraction step %s failed: %s", getattr(step, "__name__", step), exc)
        return default


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------


def parse_document(html: Union[str, bytes]) -> Optional[BeautifulSoup]:
    """Parse *html* into a queryable document, or ``None`` if the parser rejects it."""
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as exc:
        logger.warning("HTML parser rejected document: %s", exc)
        return None


def parse_html(html: Union[str, bytes], base_url: str) -> ParsedPage:
    """Extract metadata and links from *html*; relative links resolve against *base_url*.

    Never raises on malformed markup; missing elements yield empty fields.
    """
    soup = parse_document(html)
    if soup is None:
        return ParsedPage()

    return ParsedPage(
        title=_best_effort(extract_title, soup, None),
        description=_best_effort(lambda s: extract_meta(s, "description"), soup, None),
        og_title=_best_effort(lambda s: extract_meta(s, "og:title"), soup, None),
        og_description=_best_effort(lambda s: extract_meta(s, "og:description"), soup, None),
        og_image=_best_effort(lambda s: extract_meta(s, "og:image"), soup, None),
        text_preview=_best_effort(extract_text_preview, soup, None),
        headings=_best_effort(extract_headings, soup, []),
        links=_best_effort(lambda s: extract_links(s, base_url), soup, []),
    )


def parse_summary(html: Union[str, bytes], base_url: str) -> ParsedPage:
    """Title, ``<meta name="description">`` and links only; the other fields stay empty."""
    soup = parse_document(html)
    if soup is None:
        return ParsedPage()

    return ParsedPage(
        title=_best_effort(extract_title, soup, None),
        description=_best_effort(lambda s: extract_meta(s, "description", attrs=("name",)), soup, None),
        links=_best_effort(lambda s: extract_links(s, base_url), soup, []),
    )
