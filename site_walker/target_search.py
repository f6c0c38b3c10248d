from __future__ import annotations

"""Find-and-open a target listing among the many links of an index page.

Searches go from narrow to broad and stop at the first visible target:

1. ``text=<term>`` selectors for every search term,
2. ``<a>`` elements whose text or ``href`` contains a keyword,
3. any text-bearing ``h2, h3, div, span, a`` containing a keyword, clicking the
   link enclosed by its parent,
4. the catalog locator the walker already saw visible.

Intercepted clicks are retried once with force, as for every other action.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .actions import (
    CLICK_TIMEOUT_MS,
    VISIBILITY_TIMEOUT_MS,
    Action,
    ActionKind,
    ActionResult,
    click_with_retry,
    wait_for_network_settled,
)

logger = logging.getLogger(__name__)

INDEX_SETTLE_TIMEOUT_MS = 15000
EXTRA_SETTLE_MS = 2000
TEXT_PROBE_TIMEOUT_MS = 3000
LINK_PROBE_TIMEOUT_MS = 2000
BROAD_SEARCH_SELECTOR = "h2, h3, div, span, a"


@dataclass(frozen=True, eq=False)
class FindTargetAction(Action):
    # exact phrases tried with text selectors, most specific first
    search_terms: Tuple[str, ...] = ()
    # substrings looked for in link texts, hrefs and free text
    keywords: Tuple[str, ...] = ()
    required: bool = True

    kind: ClassVar[ActionKind] = ActionKind.FIND_TARGET

    async def execute(self, page: Page, selector: str) -> ActionResult:
        logger.info("Action: %s (selector=%s)", self.name, selector)
        try:
            # best-effort: ranking pages keep loading ads long after render
            await wait_for_network_settled(page, INDEX_SETTLE_TIMEOUT_MS)
            await page.wait_for_timeout(EXTRA_SETTLE_MS)

            found = (
                await self._search_by_text(page)
                or await self._search_links(page)
                or await self._search_enclosing_links(page)
                or await self._click_selector(page, selector)
            )
            if not found:
                await self._log_snippet(page)
                logger.warning("Target not found: %s", self.name)
                return ActionResult(success=False, message=f"target not found: {self.name}")

            await wait_for_network_settled(page, INDEX_SETTLE_TIMEOUT_MS)
            await page.wait_for_timeout(EXTRA_SETTLE_MS)
        except PlaywrightError as e:
            logger.error("Target search %s failed: %s", self.name, e)
            return ActionResult(success=False, message=f"error: {e}")

        current = page.url
        logger.info("Navigation: %s -> %s", self.name, current)
        return ActionResult(success=True, message=f"opened {self.name}", location=current)

    # ------------------------------------------------------------------
    def _contains_keyword(self, text: Optional[str]) -> bool:
        if not text:
            return False
        lowered = text.lower()
        return any(k.lower() in lowered for k in self.keywords)

    async def _click(self, element: Locator) -> None:
        await element.scroll_into_view_if_needed(timeout=CLICK_TIMEOUT_MS)
        await click_with_retry(element)

    async def _visible(self, element: Locator, timeout_ms: int) -> bool:
        try:
            await element.wait_for(state="visible", timeout=timeout_ms)
            return True
        except PlaywrightError:
            return False

    async def _search_by_text(self, page: Page) -> bool:
        for term in self.search_terms:
            try:
                element = page.locator(f"text={term}").first
                if await element.count() == 0:
                    continue
                if not await self._visible(element, TEXT_PROBE_TIMEOUT_MS):
                    continue
                await self._click(element)
                logger.info("Target found by text: %s", term)
                return True
            except PlaywrightError as e:
                logger.debug("Text search %r failed: %s", term, e)
        return False

    async def _search_links(self, page: Page) -> bool:
        try:
            links = await page.locator("a").all()
        except PlaywrightError as e:
            logger.warning("Link search failed: %s", e)
            return False
        logger.debug("Link candidates: %d", len(links))

        for link in links:
            try:
                text = (await link.text_content() or "").strip()
                href = await link.get_attribute("href") or ""
                if not (self._contains_keyword(text) or self._contains_keyword(href)):
                    continue
                if not await self._visible(link, LINK_PROBE_TIMEOUT_MS):
                    continue
                await self._click(link)
                logger.info("Target found by link: %s", text or href)
                return True
            except PlaywrightError as e:
                logger.debug("Skipping link: %s", e)
        return False

    async def _search_enclosing_links(self, page: Page) -> bool:
        try:
            elements = await page.locator(BROAD_SEARCH_SELECTOR).all()
        except PlaywrightError as e:
            logger.warning("Broad search failed: %s", e)
            return False

        for element in elements:
            try:
                text = await element.text_content()
                if not self._contains_keyword(text):
                    continue
                if not await self._visible(element, LINK_PROBE_TIMEOUT_MS):
                    continue
                parent_link = element.locator("..").locator("a").first
                if await parent_link.count() == 0:
                    continue
                await self._click(parent_link)
                logger.info("Target found by enclosing link: %s", (text or "")[:50])
                return True
            except PlaywrightError as e:
                logger.debug("Skipping element: %s", e)
        return False

    async def _click_selector(self, page: Page, selector: str) -> bool:
        try:
            element = page.locator(selector).first
            if await element.count() == 0:
                return False
            if not await self._visible(element, VISIBILITY_TIMEOUT_MS):
                return False
            await self._click(element)
            logger.info("Target opened through catalog locator: %s", selector)
            return True
        except PlaywrightError as e:
            logger.debug("Catalog locator %r failed: %s", selector, e)
            return False

    async def _log_snippet(self, page: Page) -> None:
        """Log the page text around the first keyword hit to help tune the catalog."""
        try:
            body = await page.locator("body").text_content() or ""
        except PlaywrightError:
            return
        lowered = body.lower()
        for keyword in self.keywords:
            idx = lowered.find(keyword.lower())
            if idx >= 0:
                logger.debug("Text around %r: %s", keyword, body[max(0, idx - 50): idx + 50])
                return
