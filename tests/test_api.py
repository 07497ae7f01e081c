# File: tests/test_api.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from crawl_scout.api import create_app
from crawl_scout.config import FetcherConfig, ServiceConfig
from crawl_scout.logger import LOGGER_NAME

from conftest import serve_app

FRONTEND = "http://localhost:5173"


@pytest_asyncio.fixture
async def content_site(unused_tcp_port: int) -> AsyncIterator[str]:
    """Сайт-источник, который обходит API."""
    app = web.Application()

    async def handle_root(_):
        return web.Response(
            text=(
                "<title>Home</title>"
                '<meta name="description" content="Start here">'
                '<a href="/a">A</a><a href="/b">B</a><a href="https://elsewhere.test/">X</a>'
            ),
            content_type="text/html",
        )

    async def handle_leaf(request):
        return web.Response(text=f"<title>{request.path}</title>", content_type="text/html")

    async def handle_image(_):
        return web.Response(body=b"\x89PNG", content_type="image/png")

    async def handle_events(_):
        return web.Response(
            text=(
                '<article><h2>Open Day</h2><time datetime="2026-11-05">Nov 5</time>'
                '<a href="/event/open-day">more</a></article>'
            ),
            content_type="text/html",
        )

    async def handle_event_detail(_):
        return web.Response(
            text='<meta property="og:image" content="/static/open-day.jpg">',
            content_type="text/html",
        )

    app.router.add_get("/", handle_root)
    app.router.add_get("/a", handle_leaf)
    app.router.add_get("/b", handle_leaf)
    app.router.add_get("/logo.png", handle_image)
    app.router.add_get("/events", handle_events)
    app.router.add_get("/event/open-day", handle_event_detail)

    async for url in serve_app(app, unused_tcp_port):
        yield url


def make_config(site: str, events_path: str = "/events") -> ServiceConfig:
    return ServiceConfig(
        allowed_origins=[FRONTEND],
        events_url=f"{site}{events_path}",
        fetcher=FetcherConfig(timeout=2.0),
    )


@pytest_asyncio.fixture
async def client(content_site: str) -> AsyncIterator[TestClient]:
    async with TestClient(TestServer(create_app(make_config(content_site)))) as test_client:
        yield test_client


# --------------------------------------------------------------------------- #
#                              Service routes                                 #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_index_and_health(client: TestClient):
    resp = await client.get("/")
    assert resp.status == 200
    assert await resp.json() == {"status": "ok", "message": "Backend is running", "docs": "/api/health"}

    resp = await client.get("/api/health")
    assert resp.status == 200
    assert (await resp.json())["status"] == "ok"


# --------------------------------------------------------------------------- #
#                              /api/scrape                                    #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
@pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": "example.com"}, {"url": 5}, ["not", "an", "object"]])
async def test_scrape_rejects_invalid_url(client: TestClient, body):
    resp = await client.post("/api/scrape", json=body)
    assert resp.status == 400
    assert await resp.json() == {"error": "Invalid or missing URL"}


@pytest.mark.asyncio()
async def test_scrape_rejects_non_json_body(client: TestClient):
    resp = await client.post("/api/scrape", data="url=https://example.com")
    assert resp.status == 400


@pytest.mark.asyncio()
async def test_scrape_page(client: TestClient, content_site: str):
    resp = await client.post("/api/scrape", json={"url": f"{content_site}/"})
    assert resp.status == 200
    data = await resp.json()
    assert data["url"] == content_site
    assert data["status"] == 200
    assert data["title"] == "Home"
    assert data["description"] == "Start here"
    assert data["links"] == [f"{content_site}/a", f"{content_site}/b", "https://elsewhere.test"]
    assert "error" not in data


@pytest.mark.asyncio()
async def test_scrape_non_html_is_ok(client: TestClient, content_site: str):
    resp = await client.post("/api/scrape", json={"url": f"{content_site}/logo.png"})
    assert resp.status == 200
    data = await resp.json()
    assert data["status"] == 200
    assert data["error"] == "Skipped non-HTML response"


@pytest.mark.asyncio()
async def test_scrape_fetch_failure_is_500(client: TestClient, content_site: str):
    resp = await client.post("/api/scrape", json={"url": f"{content_site}/missing"})
    assert resp.status == 500
    data = await resp.json()
    assert data["error"] == "Request failed with status code 404"
    assert "status" not in data


# --------------------------------------------------------------------------- #
#                              /api/crawl                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_crawl_echoes_request_and_lists_pages(client: TestClient, content_site: str):
    resp = await client.post("/api/crawl", json={"url": content_site, "maxPages": 10, "maxDepth": 1})
    assert resp.status == 200
    data = await resp.json()
    assert data["startUrl"] == content_site
    assert (data["maxPages"], data["maxDepth"], data["sameDomain"]) == (10, 1, True)
    assert [p["url"] for p in data["pages"]] == [content_site, f"{content_site}/a", f"{content_site}/b"]
    assert data["pages"][1]["title"] == "/a"


@pytest.mark.asyncio()
async def test_crawl_clamps_bounds(client: TestClient, content_site: str):
    resp = await client.post(
        "/api/crawl", json={"url": content_site, "maxPages": 100, "maxDepth": -1, "sameDomain": "false"}
    )
    assert resp.status == 200
    data = await resp.json()
    assert (data["maxPages"], data["maxDepth"], data["sameDomain"]) == (20, 0, False)
    assert len(data["pages"]) == 1


@pytest.mark.asyncio()
async def test_crawl_rejects_missing_url(client: TestClient):
    resp = await client.post("/api/crawl", json={"maxPages": 3})
    assert resp.status == 400
    assert await resp.json() == {"error": "Invalid or missing URL"}


@pytest.mark.asyncio()
async def test_crawl_of_unreachable_start_still_succeeds(client: TestClient, unused_tcp_port_factory):
    dead = f"http://127.0.0.1:{unused_tcp_port_factory()}"
    resp = await client.post("/api/crawl", json={"url": dead})
    assert resp.status == 200
    pages = (await resp.json())["pages"]
    assert len(pages) == 1
    assert pages[0]["url"] == dead
    assert pages[0]["error"]


# --------------------------------------------------------------------------- #
#                              /api/events                                    #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_events(client: TestClient, content_site: str):
    resp = await client.get("/api/events")
    assert resp.status == 200
    assert await resp.json() == {
        "source": f"{content_site}/events",
        "count": 1,
        "events": [
            {
                "title": "Open Day",
                "date": "2026-11-05",
                "url": f"{content_site}/event/open-day",
                "image": f"{content_site}/static/open-day.jpg",
            }
        ],
    }


@pytest.mark.asyncio()
async def test_events_source_failure(content_site: str):
    app = create_app(make_config(content_site, events_path="/no-such-page"))
    async with TestClient(TestServer(app)) as test_client:
        resp = await test_client.get("/api/events")
        assert resp.status == 500
        assert await resp.json() == {"error": "Failed to fetch events"}


# --------------------------------------------------------------------------- #
#                              CORS                                           #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_cors_preflight_for_allowed_origin(client: TestClient):
    resp = await client.options(
        "/api/crawl",
        headers={
            "Origin": FRONTEND,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert resp.status == 204
    assert resp.headers["Access-Control-Allow-Origin"] == FRONTEND
    assert resp.headers["Access-Control-Allow-Credentials"] == "true"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]


@pytest.mark.asyncio()
async def test_cors_headers_on_regular_response(client: TestClient):
    resp = await client.get("/api/health", headers={"Origin": FRONTEND})
    assert resp.headers["Access-Control-Allow-Origin"] == FRONTEND

    resp = await client.get("/api/health", headers={"Origin": "https://evil.test"})
    assert resp.status == 200
    assert "Access-Control-Allow-Origin" not in resp.headers


# --------------------------------------------------------------------------- #
#                              Cancellation                                   #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_client_disconnect_cancels_crawl(unused_tcp_port_factory, caplog):
    started = asyncio.Event()
    dropped = asyncio.Event()

    async def handle_slow(_):
        started.set()
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            dropped.set()
            raise
        return web.Response(text="<title>late</title>", content_type="text/html")

    slow_app = web.Application()
    slow_app.router.add_get("/", handle_slow)

    project_logger = logging.getLogger(LOGGER_NAME)
    project_logger.addHandler(caplog.handler)
    try:
        async for site in serve_app(slow_app, unused_tcp_port_factory(), handler_cancellation=True):
            config = ServiceConfig(events_url=f"{site}/events", fetcher=FetcherConfig(timeout=30))
            server = TestServer(create_app(config), handler_cancellation=True)
            async with TestClient(server) as test_client:

                async def post_crawl():
                    return await test_client.post("/api/crawl", json={"url": site})

                with pytest.raises(asyncio.TimeoutError):
                    await asyncio.wait_for(post_crawl(), timeout=0.5)

                # the crawl's fetch is aborted, so the slow page loses its client
                await asyncio.wait_for(dropped.wait(), timeout=5)
                for _ in range(50):
                    if any("Client went away" in r.getMessage() for r in caplog.records):
                        break
                    await asyncio.sleep(0.05)
    finally:
        project_logger.removeHandler(caplog.handler)

    assert started.is_set()
    assert dropped.is_set()
    assert any("Client went away" in r.getMessage() for r in caplog.records)
