from __future__ import annotations

from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

HIGHLIGHT_MS = 500


class ActionHighlighter:
    """
    Visual feedback for headed runs: outlines the element about to be clicked.
    """

    def __init__(self, hold_ms: int = HIGHLIGHT_MS) -> None:
        self.hold_ms = hold_ms
        self.highlighted: Optional[str] = None

    async def highlight(self, page: Page, selector: str) -> None:
        """
        Put a red border on the first element matching `selector` and hold it briefly.

        Args:
            page (Page): The Playwright page object.
            selector (str): The locator strategy chosen for the next action.
        """
        element: Locator = page.locator(selector).first
        try:
            await element.evaluate(
                """
                (elm) => {
                    elm.setAttribute('data-walker-highlight', '1');
                    elm.style.transition = 'outline 0.3s ease-in-out';
                    elm.style.outline = '3px solid red';
                }
                """
            )
            self.highlighted = selector
            await page.wait_for_timeout(self.hold_ms)
        except PlaywrightError:
            # purely cosmetic
            pass

    async def clear(self, page: Page) -> None:
        """
        Remove every highlight that is still on the page.

        Args:
            page (Page): The Playwright page object.
        """
        try:
            await page.evaluate(
                """
                () => {
                    document.querySelectorAll('[data-walker-highlight]').forEach(el => {
                        el.style.outline = '';
                        el.style.transition = '';
                        el.removeAttribute('data-walker-highlight');
                    });
                }
                """
            )
        except PlaywrightError:
            pass
        self.highlighted = None
