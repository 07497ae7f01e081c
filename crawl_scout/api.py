# File: crawl_scout/api.py
"""crawl_scout.api: HTTP-обёртка над движком (aiohttp.web).

Маршруты:
  GET  /              статус сервиса
  GET  /api/health    статус сервиса
  POST /api/scrape    {url} -> ScrapeReport
  POST /api/crawl     {url, maxPages?, maxDepth?, sameDomain?} -> CrawlResult
  GET  /api/events    список событий со страницы events_url

Сервер запускается с handler_cancellation=True: если клиент отключился,
задача обработчика отменяется вместе с текущим запросом краулера.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Dict, Optional

from aiohttp import web
from pydantic import ValidationError

from crawl_scout.config import (
    INVALID_URL_MESSAGE,
    CrawlRequest,
    ScrapeRequest,
    ServiceConfig,
)
from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.engine import run_crawl, run_scrape
from crawl_scout.events import EventsUnavailableError, collect_events
from crawl_scout.logger import logger
from crawl_scout.scanner import INVALID_URL_ERROR
from crawl_scout.utils import InvalidUrlError

__all__ = ["create_app", "run_server", "CONFIG_KEY", "FETCHER_KEY"]

CONFIG_KEY = web.AppKey("config", ServiceConfig)
FETCHER_KEY = web.AppKey("fetcher", Fetcher)

_STATUS_OK = {"status": "ok", "message": "Backend is running"}


def _json_error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def _read_body(request: web.Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# --------------------------------------------------------------------------- #
# Handlers                                                                    #
# --------------------------------------------------------------------------- #


async def index(_: web.Request) -> web.Response:
    return web.json_response({**_STATUS_OK, "docs": "/api/health"})


async def health(_: web.Request) -> web.Response:
    return web.json_response(_STATUS_OK)


async def scrape_handler(request: web.Request) -> web.Response:
    try:
        payload = ScrapeRequest.model_validate(await _read_body(request))
    except ValidationError:
        return _json_error(INVALID_URL_MESSAGE, 400)

    report = await run_scrape(request.app[FETCHER_KEY], payload.url)
    if report.error == INVALID_URL_ERROR:
        return _json_error(INVALID_URL_ERROR, 400)
    return web.json_response(report.to_dict(), status=500 if report.fetch_failed else 200)


async def crawl_handler(request: web.Request) -> web.Response:
    try:
        payload = CrawlRequest.model_validate(await _read_body(request))
    except ValidationError:
        return _json_error(INVALID_URL_MESSAGE, 400)

    try:
        result = await run_crawl(request.app[FETCHER_KEY], payload)
    except InvalidUrlError:
        return _json_error(INVALID_URL_ERROR, 400)
    except asyncio.CancelledError:
        logger.info("Client went away, crawl of %s cancelled", payload.url)
        raise
    except Exception:
        logger.exception("Crawl failed for %s", payload.url)
        return _json_error("Crawl failed", 500)
    return web.json_response(result.to_dict())


async def events_handler(request: web.Request) -> web.Response:
    source = request.app[CONFIG_KEY].events_url
    try:
        events = await collect_events(request.app[FETCHER_KEY], source)
    except EventsUnavailableError as exc:
        logger.error("Failed to fetch events from %s: %s", source, exc)
        return _json_error("Failed to fetch events", 500)
    return web.json_response(
        {"source": source, "count": len(events), "events": [e.to_dict() for e in events]}
    )


# --------------------------------------------------------------------------- #
# Middleware & lifecycle                                                      #
# --------------------------------------------------------------------------- #


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Разрешает CORS для origin'ов из allowed_origins и отвечает на preflight."""
    origin = request.headers.get("Origin")
    allowed = origin is not None and origin in request.app[CONFIG_KEY].allowed_origins

    if allowed and request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=204)
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = request.headers.get(
            "Access-Control-Request-Headers", "Content-Type"
        )
    else:
        response = await handler(request)

    if allowed:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"
    return response


async def _fetcher_ctx(app: web.Application) -> AsyncIterator[None]:
    async with Fetcher(app[CONFIG_KEY].fetcher) as fetcher:
        app[FETCHER_KEY] = fetcher
        yield


def create_app(config: Optional[ServiceConfig] = None) -> web.Application:
    """Собирает aiohttp-приложение; HTTP-сессия краулера живёт столько же, сколько приложение."""
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config or ServiceConfig()
    app.cleanup_ctx.append(_fetcher_ctx)

    app.router.add_get("/", index)
    app.router.add_get("/api/health", health)
    app.router.add_post("/api/scrape", scrape_handler)
    app.router.add_post("/api/crawl", crawl_handler)
    app.router.add_get("/api/events", events_handler)
    return app


def run_server(config: ServiceConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Запускает сервис и блокирует до остановки (Ctrl-C)."""
    host = host or config.host
    port = port or config.port
    logger.info("API listening on http://%s:%d", host, port)
    web.run_app(
        create_app(config),
        host=host,
        port=port,
        handler_cancellation=True,
        print=None,
    )
