"""HTTP fetcher with plain GET and headless-browser rendering modes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path

import httpx

from nosy.errors import FetchError, HttpStatusError, StagingError
from nosy.pipeline.models import RAW_CONTENT_FILENAME
from nosy.pipeline.progress import ProgressSink

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class HttpFetchMode(Enum):
    GET = "get"
    HEADLESS = "headless"


@dataclass(frozen=True, slots=True)
class HttpFetcherOptions:
    mode: HttpFetchMode = HttpFetchMode.GET
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT


def _render_headless(uri: str, timeout_seconds: float) -> str:
    """Load ``uri`` in headless Chromium and return the rendered DOM.

    Blocking; call it from a worker thread.
    """
    from playwright.sync_api import Error as PlaywrightError
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=True)
            try:
                page = browser.new_page()
                response = page.goto(uri, wait_until="load", timeout=timeout_seconds * 1000)
                if response is not None and not response.ok:
                    raise HttpStatusError(
                        "Headless navigation returned an error status",
                        uri=uri,
                        status_code=response.status,
                    )
                return page.content()
            finally:
                browser.close()
    except PlaywrightError as exc:
        raise FetchError(f"Headless browser fetch failed: {exc}", uri=uri) from exc


class HttpFetcher:
    """Stage the body of an HTTP(S) resource as ``<workdir>/raw``."""

    def __init__(
        self,
        options: HttpFetcherOptions | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._options = options or HttpFetcherOptions()
        self._transport = transport

    @property
    def options(self) -> HttpFetcherOptions:
        return self._options

    async def fetch(self, uri: str, workdir: Path, progress: ProgressSink) -> Path:
        progress.update(f"Fetching HTTP content from {uri}")
        if self._options.mode is HttpFetchMode.HEADLESS:
            html = await asyncio.to_thread(_render_headless, uri, self._options.timeout_seconds)
            content = html.encode("utf-8")
        else:
            content = await self._get(uri)

        progress.update("Writing fetched content to disk")
        target = workdir / RAW_CONTENT_FILENAME
        try:
            await asyncio.to_thread(target.write_bytes, content)
        except OSError as exc:
            raise StagingError(f"Failed to write fetched content: {exc}", path=str(target)) from exc
        logger.debug("Staged %d bytes from %s at %s", len(content), uri, target)
        return target

    async def _get(self, uri: str) -> bytes:
        headers = {"User-Agent": self._options.user_agent}
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self._options.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(uri, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Failed to send GET request: {exc}", uri=uri) from exc

        if not response.is_success:
            raise HttpStatusError("GET request failed", uri=uri, status_code=response.status_code)
        return response.content
