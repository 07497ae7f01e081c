# crawl_scout/crawler/fetcher.py
"""
Fetcher module: one bounded HTTP GET per call, transport failures returned as data.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL, TooManyRedirects

from crawl_scout.config import FetcherConfig
from crawl_scout.crawler.models import FetchFailure, FetchResult, FetchSuccess
from crawl_scout.logger import logger


class Fetcher:
    """Performs single-attempt GET requests with a fixed user agent, timeout and redirect cap.

    Use as an async context manager to get a managed ``ClientSession``, or pass
    an existing session (it is then left open on exit).
    """

    def __init__(
        self,
        config: Optional[FetcherConfig] = None,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config or FetcherConfig()
        self.session = session
        self._owns_session = session is None

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.config.user_agent, "Accept": self.config.accept}

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers=self.headers,
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str, *, timeout: Optional[float] = None) -> FetchResult:
        """
        GET *url* once.

        Returns FetchSuccess for a 2xx response (body read only for HTML) and
        FetchFailure for everything else. Cancellation is not intercepted.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        seconds = timeout or self.config.timeout
        # aiohttp counts the redirect response itself against max_redirects and
        # treats 0 as "no limit"
        redirects = self.config.max_redirects
        try:
            async with self.session.get(
                url,
                headers=self.headers,
                timeout=ClientTimeout(total=seconds),
                allow_redirects=redirects > 0,
                max_redirects=redirects + 1,
            ) as resp:
                status = resp.status
                ctype = resp.headers.get("Content-Type", "")
                if not 200 <= status < 300:
                    reason = f"Request failed with status code {status}"
                elif "text/html" not in ctype.lower():
                    logger.debug("Non-HTML response %s (%s)", url, ctype or "no content type")
                    return FetchSuccess(url, status, ctype)
                else:
                    body = await resp.text(errors="replace")
                    logger.debug("Fetched %s -> %d (%d chars)", url, status, len(body))
                    return FetchSuccess(url, status, ctype, body)
        except asyncio.TimeoutError:
            reason = f"timeout of {seconds:g}s exceeded"
        except TooManyRedirects:
            reason = "Maximum number of redirects exceeded"
        except InvalidURL as exc:
            reason = f"Invalid URL: {exc}"
        except ClientError as exc:
            reason = str(exc) or exc.__class__.__name__
        except (ValueError, UnicodeError) as exc:
            reason = str(exc) or "Request failed"

        logger.warning("Failed %s: %s", url, reason)
        return FetchFailure(url, reason)
