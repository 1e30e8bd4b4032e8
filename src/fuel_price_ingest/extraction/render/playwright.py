# ABOUTME: Playwright-driven page renderer that snapshots HTML once the network goes quiescent
# ABOUTME: Launches one Chromium process per render and always closes it, even on failure or cancellation

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Browser, Page, Request, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from fuel_price_ingest.core.models import RenderedDocument
from fuel_price_ingest.extraction.base import NavigationError, RenderError, RenderTimeout
from fuel_price_ingest.utils.logging import get_logger, log_extraction_step
from fuel_price_ingest.utils.retry import navigation_retry


@dataclass(frozen=True)
class NetworkIdlePolicy:
    """Quiescence: at most ``max_connections`` in-flight requests for ``idle_ms``."""

    max_connections: int = 2
    idle_ms: int = 500


class NetworkIdleMonitor:
    """Counts in-flight requests from page events and waits for a quiet window."""

    def __init__(self, policy: NetworkIdlePolicy):
        self.policy = policy
        self._in_flight: set[Request] = set()
        self._busy = asyncio.Event()
        self._quiet = asyncio.Event()
        self._quiet.set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def attach(self, page: Page) -> None:
        page.on("request", self.on_request)
        page.on("requestfinished", self.on_request_done)
        page.on("requestfailed", self.on_request_done)

    def on_request(self, request: Request) -> None:
        self._in_flight.add(request)
        if self.in_flight > self.policy.max_connections:
            self._quiet.clear()
            self._busy.set()

    def on_request_done(self, request: Request) -> None:
        self._in_flight.discard(request)
        if self.in_flight <= self.policy.max_connections:
            self._quiet.set()

    async def wait_for_idle(self, timeout: float) -> None:
        """Block until the idle window elapses without exceeding the connection limit.

        Raises:
            RenderTimeout: If the network does not settle within ``timeout`` seconds
        """
        try:
            async with asyncio.timeout(timeout):
                while True:
                    if self.in_flight > self.policy.max_connections:
                        await self._quiet.wait()
                        continue

                    self._busy.clear()
                    try:
                        await asyncio.wait_for(self._busy.wait(), self.policy.idle_ms / 1000)
                    except TimeoutError:
                        return
        except TimeoutError as e:
            raise RenderTimeout(
                f"Network did not go idle within {timeout}s ({self.in_flight} requests still in flight)"
            ) from e


class PageRenderer:
    """Renders a client-side page with a real browser engine and returns its HTML."""

    def __init__(
        self,
        headless: bool = True,
        idle_policy: NetworkIdlePolicy | None = None,
        navigation_timeout: float = 30.0,
        settle_timeout: float = 20.0,
        navigation_attempts: int = 1,
        playwright_factory: Callable = async_playwright,
    ):
        """Initialize the renderer.

        Args:
            headless: Whether to run the browser in headless mode
            idle_policy: Quiescence policy (defaults to <=2 connections for 500ms)
            navigation_timeout: Seconds allowed for the initial navigation
            settle_timeout: Seconds allowed for the network to go idle afterwards
            navigation_attempts: Attempts for transient navigation failures
            playwright_factory: Context manager factory yielding a Playwright instance
        """
        self.headless = headless
        self.idle_policy = idle_policy or NetworkIdlePolicy()
        self.navigation_timeout = navigation_timeout
        self.settle_timeout = settle_timeout
        self.navigation_attempts = navigation_attempts
        self.playwright_factory = playwright_factory
        self.logger = get_logger(__name__)

    @log_extraction_step("render_page")
    async def render(self, url: str) -> RenderedDocument:
        """Render ``url`` and snapshot the document once the network settles.

        Raises:
            RenderTimeout: If navigation or the idle wait exceeds its bound
            NavigationError: If the page is unreachable after all attempts
            RenderError: If the browser fails in any other way
        """
        render_with_retry = navigation_retry(max_attempts=self.navigation_attempts)(self._render_once)
        return await render_with_retry(url)

    async def _render_once(self, url: str) -> RenderedDocument:
        try:
            async with self.playwright_factory() as playwright:
                try:
                    browser = await playwright.chromium.launch(headless=self.headless)
                except PlaywrightError as e:
                    raise RenderError(f"Could not launch browser: {e.message}") from e
                self.logger.debug("Launched browser", headless=self.headless)
                try:
                    page = await browser.new_page()
                    monitor = NetworkIdleMonitor(self.idle_policy)
                    monitor.attach(page)

                    self.logger.info("Navigating", url=url)
                    await self._navigate(page, url)

                    await monitor.wait_for_idle(self.settle_timeout)
                    html = await page.content()
                finally:
                    await self._close(browser)
        except PlaywrightTimeoutError as e:
            raise RenderTimeout(f"Rendering {url} timed out: {e.message}") from e
        except PlaywrightError as e:
            raise RenderError(f"Rendering {url} failed: {e.message}") from e

        self.logger.info("Rendered page", url=url, html_length=len(html))
        return RenderedDocument(url=url, html=html)

    async def _close(self, browser: Browser) -> None:
        try:
            await browser.close()
        except PlaywrightError as e:
            self.logger.warning("Failed to close browser", error=e.message)
        else:
            self.logger.debug("Closed browser")

    async def _navigate(self, page: Page, url: str) -> None:
        try:
            response = await page.goto(url, wait_until="load", timeout=self.navigation_timeout * 1000)
        except PlaywrightTimeoutError as e:
            raise RenderTimeout(f"Navigation to {url} timed out after {self.navigation_timeout}s") from e
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {url} failed: {e.message}") from e

        if response is not None and response.status >= 400:
            raise NavigationError(f"Navigation to {url} returned HTTP {response.status}")
