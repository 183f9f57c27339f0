"""Page renderers used to load the price history document.

A renderer is acquired per pipeline run and released on every exit path::

    async with renderer_factory() as renderer:
        document = await renderer.open(url, timeout=60.0)
        await document.wait_for_selector("table", timeout=10.0)
        html = await document.content()

Timeouts surface as the builtin :class:`TimeoutError` regardless of backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType
from typing import Any

import httpx
from bs4 import BeautifulSoup
from loguru import logger
from playwright.async_api import Browser, Page, Playwright, Route, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
)
BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media"})
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class Document(ABC):
    """A loaded page."""

    @abstractmethod
    async def wait_for_selector(self, selector: str, *, timeout: float) -> None:
        """Block until ``selector`` matches, raising :class:`TimeoutError` after ``timeout`` seconds."""

    @abstractmethod
    async def content(self) -> str:
        """Return the current HTML of the page."""


class PageRenderer(ABC):
    """Capability to open pages; owns whatever resources that takes."""

    @abstractmethod
    async def open(self, url: str, *, timeout: float) -> Document:
        """Navigate to ``url`` within ``timeout`` seconds."""

    @abstractmethod
    async def close(self) -> None:
        """Release every resource held by the renderer."""

    async def __aenter__(self) -> PageRenderer:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


class PlaywrightDocument(Document):
    def __init__(self, page: Page) -> None:
        self._page = page

    async def wait_for_selector(self, selector: str, *, timeout: float) -> None:
        try:
            await self._page.wait_for_selector(selector, timeout=timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise TimeoutError(f"Selector {selector!r} did not appear within {timeout}s") from exc

    async def content(self) -> str:
        return await self._page.content()


class PlaywrightPageRenderer(PageRenderer):
    """Headless Chromium driven through Playwright."""

    def __init__(
        self,
        *,
        headless: bool = True,
        executable_path: str | None = None,
        launch_args: Sequence[str] = DEFAULT_LAUNCH_ARGS,
        block_resources: bool = False,
    ) -> None:
        self.headless = headless
        self.executable_path = executable_path
        self.launch_args = list(launch_args)
        self.block_resources = block_resources
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def _ensure_browser(self) -> Browser:
        if self._browser is None:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=self.launch_args,
            )
            logger.bind(headless=self.headless).debug("Chromium launched")
        return self._browser

    async def open(self, url: str, *, timeout: float) -> Document:
        browser = await self._ensure_browser()
        page = await browser.new_page(user_agent=DEFAULT_USER_AGENT)
        if self.block_resources:
            await page.route("**/*", _abort_heavy_resources)
        try:
            await page.goto(url, timeout=timeout * 1000, wait_until="domcontentloaded")
        except PlaywrightTimeoutError as exc:
            raise TimeoutError(f"Navigation to {url} did not finish within {timeout}s") from exc
        return PlaywrightDocument(page)

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None


async def _abort_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class StaticDocument(Document):
    """Already-rendered HTML; selectors either match now or never will."""

    def __init__(self, html: str) -> None:
        self.html = html

    async def wait_for_selector(self, selector: str, *, timeout: float) -> None:
        if BeautifulSoup(self.html, "html.parser").select_one(selector) is None:
            raise TimeoutError(f"Selector {selector!r} not present in static document")

    async def content(self) -> str:
        return self.html


class StaticPageRenderer(PageRenderer):
    """Fetch pages over plain HTTP without executing scripts."""

    def __init__(self, client: httpx.AsyncClient | None = None, headers: dict[str, str] | None = None) -> None:
        self._client = client
        self._owns_client = client is None
        self._headers = {"User-Agent": DEFAULT_USER_AGENT, **(headers or {})}

    async def open(self, url: str, *, timeout: float) -> Document:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True, headers=self._headers)
        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise TimeoutError(f"Navigation to {url} did not finish within {timeout}s") from exc
        response.raise_for_status()
        return StaticDocument(response.text)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def create_renderer(kind: str, **options: Any) -> PageRenderer:
    """Instantiate a renderer by name."""

    normalized = kind.strip().lower()
    if normalized == "playwright":
        return PlaywrightPageRenderer(**options)
    if normalized == "static":
        return StaticPageRenderer()
    msg = f"Unsupported renderer '{kind}'. Available renderers: playwright, static."
    raise ValueError(msg)


__all__ = [
    "Document",
    "PageRenderer",
    "PlaywrightDocument",
    "PlaywrightPageRenderer",
    "StaticDocument",
    "StaticPageRenderer",
    "create_renderer",
]
