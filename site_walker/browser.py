from __future__ import annotations

"""Playwright browser bootstrap: one browser, one context, one page."""

import logging
import os
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .config import BrowserConfig
from .errors import NavigationError

logger = logging.getLogger(__name__)

# first attempt waits for the network to settle, the retry only for the DOM
NAVIGATION_WAIT_POLICIES = ("networkidle", "domcontentloaded")

# plain-text "what is my IP" endpoints, tried in order
IP_SERVICES = (
    "https://api.ipify.org?format=text",
    "https://icanhazip.com",
    "https://ifconfig.me/ip",
)
IP_CHECK_TIMEOUT_MS = 10000


class BrowserSession:
    """Owns the page the walker drives.

    Use as an async context manager, or pass an already open `page` to drive an
    existing context.
    """

    def __init__(self, config: BrowserConfig | None = None, page: Page | None = None) -> None:
        self.config = config or BrowserConfig()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = page

    async def __aenter__(self) -> "BrowserSession":
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    async def launch(self) -> None:
        logger.info("Launching browser (headless=%s)", self.config.headless)
        launch_kwargs = {"headless": self.config.headless}
        if self.config.channel:
            launch_kwargs["channel"] = self.config.channel
        if self.config.proxy:
            launch_kwargs["proxy"] = self.config.proxy.next_playwright_proxy()
            logger.info("Using proxy %s", launch_kwargs["proxy"]["server"])

        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(**launch_kwargs)
            self._context = await self._browser.new_context(
                viewport=self.config.viewport,
                user_agent=self.config.user_agent,
            )
            self._page = await self._context.new_page()
            self._page.set_default_timeout(self.config.timeout_ms)
        except PlaywrightError:
            logger.exception("Browser launch failed")
            await self.close()
            raise
        logger.info("Browser ready")
        if self.config.proxy:
            await self.current_ip()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser is not running – call launch() first")
        return self._page

    async def navigate(self, url: str, timeout_ms: int | None = None) -> None:
        """Go to `url`, retrying once with a relaxed wait policy."""
        timeout = timeout_ms or self.config.timeout_ms
        last_error: Optional[PlaywrightError] = None
        for wait_until in NAVIGATION_WAIT_POLICIES:
            try:
                logger.info("Navigating to %s (wait_until=%s)", url, wait_until)
                await self.page.goto(url, wait_until=wait_until, timeout=timeout)
                return
            except PlaywrightError as e:
                logger.warning("Navigation to %s failed (wait_until=%s): %s", url, wait_until, e)
                last_error = e
        raise NavigationError(f"Navigation to {url} failed: {last_error}") from last_error

    async def screenshot(self, path: str) -> Optional[str]:
        """Best-effort full page capture. Returns the path, or None on failure."""
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            await self.page.screenshot(path=path, full_page=True)
        except (PlaywrightError, OSError, RuntimeError) as e:
            logger.error("Failed to save screenshot %s: %s", path, e)
            return None
        logger.info("Screenshot saved: %s", path)
        return path

    async def current_ip(self) -> Optional[str]:
        """Public IP the browser is seen with, or None if no service answered.

        Requests go through the context's API client, so the proxy applies and
        the page is not navigated.
        """
        request = self.page.context.request
        for service in IP_SERVICES:
            try:
                response = await request.get(service, timeout=IP_CHECK_TIMEOUT_MS)
                if not response.ok:
                    logger.debug("IP service %s answered %d", service, response.status)
                    continue
                ip = (await response.text()).strip()
            except PlaywrightError as e:
                logger.debug("IP service %s failed: %s", service, e)
                continue
            if ip:
                logger.info("Current IP: %s (via %s)", ip, service)
                return ip
        logger.warning("Could not determine the current IP address")
        return None

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
                logger.info("Browser closed")
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._browser = None
            self._context = None
            self._playwright = None
            self._page = None
