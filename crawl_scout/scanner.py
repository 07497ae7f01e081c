# === FILE: crawl_scout/scanner.py ===
"""
Single-page scrape: fetch one URL and extract its full metadata set.
"""
from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.crawler.models import NON_HTML_ERROR, ScrapeReport
from crawl_scout.logger import logger
from crawl_scout.parser.html_parser import parse_html
from crawl_scout.utils import normalize_url

INVALID_URL_ERROR = "Invalid URL"


async def scrape(fetcher: Fetcher, url: str) -> ScrapeReport:
    """
    Fetch *url* once and build a ScrapeReport.

    Parameters
    ----------
    fetcher : Fetcher
        Open fetcher used for the single request.
    url : str
        Page address; callers are expected to have checked it is http(s).

    Returns
    -------
    ScrapeReport
        ``error`` only when the URL is unusable or the request failed,
        ``status`` + ``error`` for non-HTML responses, every field otherwise.
    """
    target = normalize_url(url)
    if target is None:
        return ScrapeReport(url=url, error=INVALID_URL_ERROR)

    result = await fetcher.fetch(target)
    if not result.ok:
        return ScrapeReport(url=target, error=result.error)
    if not result.is_html:
        return ScrapeReport(url=target, status=result.status, error=NON_HTML_ERROR)

    parsed = parse_html(result.body, target)
    logger.info("Scraped %s: %d headings, %d links", target, len(parsed.headings), len(parsed.links))
    return ScrapeReport(
        url=target,
        status=result.status,
        title=parsed.title,
        description=parsed.description,
        og_title=parsed.og_title,
        og_description=parsed.og_description,
        og_image=parsed.og_image,
        text_preview=parsed.text_preview,
        headings=parsed.headings,
        links=parsed.links,
    )


__all__ = ["scrape", "INVALID_URL_ERROR"]
