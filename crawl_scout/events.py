# File: crawl_scout/events.py
"""crawl_scout.events: Сбор анонсов событий со страницы-списка (заголовок, дата, ссылка, картинка)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.crawler.models import NON_HTML_ERROR
from crawl_scout.logger import logger
from crawl_scout.parser.html_parser import parse_document
from crawl_scout.utils import to_absolute_url

__all__ = ["EventItem", "EventsUnavailableError", "parse_event_listing", "collect_events"]

EVENT_LINK_SELECTOR = 'a[href*="/event/"]'
EVENT_LINK_LIMIT = 30
DETAIL_TIMEOUT = 8.0

_CONTAINER_TAGS = ("article", "li")
_CONTAINER_CLASSES = ("event", "event-item", "event-list__item")


class EventsUnavailableError(RuntimeError):
    """Страница со списком событий не загрузилась."""


@dataclass(slots=True)
class EventItem:
    """Одно событие из списка."""

    title: str
    date: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"title": self.title, "date": self.date, "url": self.url, "image": self.image}
        return {k: v for k, v in data.items() if v is not None}


def _is_container(tag: Tag) -> bool:
    if tag.name in _CONTAINER_TAGS:
        return True
    classes = tag.get("class") or []
    return any(cls in classes for cls in _CONTAINER_CLASSES)


def _first_text(container: Tag, selector: str) -> str:
    tag = container.select_one(selector)
    return tag.get_text().strip() if tag is not None else ""


def _event_date(container: Optional[Tag]) -> Optional[str]:
    if container is None:
        return None
    time_tag = container.find("time")
    if isinstance(time_tag, Tag):
        stamp = time_tag.get("datetime")
        if isinstance(stamp, str) and stamp:
            return stamp
        text = time_tag.get_text().strip()
        if text:
            return text
    return _first_text(container, ".date, .event-date") or None


def parse_event_listing(html: str, base_url: str) -> List[EventItem]:
    """Разбирает страницу-список: ссылки вида */event/*, заголовок и дата из ближайшего контейнера."""
    soup = parse_document(html)
    if soup is None:
        return []

    events: List[EventItem] = []
    seen: set[str] = set()
    for link in soup.select(EVENT_LINK_SELECTOR, limit=EVENT_LINK_LIMIT):
        href = link.get("href")
        absolute = to_absolute_url(href if isinstance(href, str) else None, base_url)
        if not absolute or absolute in seen:
            continue
        seen.add(absolute)

        container = link if _is_container(link) else link.find_parent(_is_container)
        title = _first_text(container, "h3, h2, .event-title") if container is not None else ""
        title = title or link.get_text().strip()
        if not title:
            continue
        events.append(EventItem(title=title, date=_event_date(container), url=absolute))
    return events


def extract_event_image(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    """og:image страницы события, иначе первая картинка; URL приводится к абсолютному."""
    og = soup.find("meta", attrs={"property": "og:image"})
    candidate = og.get("content") if isinstance(og, Tag) else None
    if not candidate:
        img = soup.find("img")
        candidate = img.get("src") if isinstance(img, Tag) else None
    return to_absolute_url(candidate if isinstance(candidate, str) else None, page_url)


async def _attach_image(fetcher: Fetcher, event: EventItem) -> None:
    if not event.url:
        return
    result = await fetcher.fetch(event.url, timeout=DETAIL_TIMEOUT)
    if not result.ok or not result.is_html:
        return
    soup = parse_document(result.body)
    if soup is not None:
        event.image = extract_event_image(soup, event.url)


async def collect_events(fetcher: Fetcher, listing_url: str, limit: int = 5) -> List[EventItem]:
    """Загружает список событий и параллельно дополняет первые *limit* картинками со страниц событий."""
    result = await fetcher.fetch(listing_url)
    if not result.ok:
        raise EventsUnavailableError(result.error)
    if not result.is_html:
        raise EventsUnavailableError(NON_HTML_ERROR)

    events = parse_event_listing(result.body, listing_url)[:limit]
    await asyncio.gather(*(_attach_image(fetcher, event) for event in events))
    logger.info("Collected %d events from %s", len(events), listing_url)
    return events
