from __future__ import annotations

"""Action descriptors and the shared click executor.

Every action exposes one coroutine, ``execute(page, selector)``, which receives
a selector the walker has already seen visible and returns an immutable
`ActionResult`. Interaction errors never escape `execute`: they become failed
results so the walk can carry on.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .matchers import LocationMatcher

logger = logging.getLogger(__name__)

# Bounds (ms) for individual page operations
VISIBILITY_TIMEOUT_MS = 2000
CLICK_TIMEOUT_MS = 5000
NETWORK_SETTLE_TIMEOUT_MS = 10000
PANEL_ACTIVE_TIMEOUT_MS = 3000
SCROLL_SETTLE_MS = 300

# CSS suffixes that mark a tab / panel as the active one
ACTIVE_STATES: Tuple[str, ...] = ('[aria-selected="true"]', ".active", ".is-active")


class ActionKind(str, Enum):
    CLICK = "click"
    TAB = "tab"
    FIND_TARGET = "find_target"


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str = ""
    location: Optional[str] = None


@dataclass(frozen=True, eq=False)
class Action(ABC):
    """A named catalog interaction. Two actions are equal iff their names are."""

    name: str
    locators: Tuple[str, ...]
    description: str = ""
    required: bool = False
    # locations where the action makes no sense, e.g. the target's own page
    skip_on: Optional[LocationMatcher] = None

    kind: ClassVar[ActionKind] = ActionKind.CLICK

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Action) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def is_applicable(self, location: str) -> bool:
        return self.skip_on is None or not self.skip_on.matches(location)

    @abstractmethod
    async def execute(self, page: Page, selector: str) -> ActionResult:
        raise NotImplementedError


# ----------------------------------------------------------------------
# Interaction helpers ---------------------------------------------------


def is_intercepted(error: Exception) -> bool:
    """True for Playwright click failures caused by an overlapping element."""
    return "intercepts pointer events" in str(error)


async def click_with_retry(element: Locator, timeout_ms: int = CLICK_TIMEOUT_MS) -> None:
    """Click once; if another element intercepts the pointer, force one retry."""
    try:
        await element.click(timeout=timeout_ms)
    except PlaywrightError as e:
        if not is_intercepted(e):
            raise
        logger.info("Click intercepted by an overlapping element – retrying with force")
        await element.click(timeout=timeout_ms, force=True)


async def wait_for_network_settled(page: Page, timeout_ms: int = NETWORK_SETTLE_TIMEOUT_MS) -> bool:
    """Wait for network idle. Returns False instead of raising on timeout."""
    try:
        await page.wait_for_load_state("networkidle", timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        return False


async def wait_for_marker_active(
    page: Page, attribute: str, value: str, timeout_ms: int = PANEL_ACTIVE_TIMEOUT_MS
) -> bool:
    """Wait until the element carrying ``attribute=value`` is in an active state.

    Returns False instead of raising on timeout.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    selector = ", ".join(f'[{attribute}="{escaped}"]{state}' for state in ACTIVE_STATES)
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        return False


# ----------------------------------------------------------------------
# Executors -------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class ClickAction(Action):
    """Generic click: scroll, settle, click, then wait for the effect.

    Elements carrying `marker_attribute` switch a panel on the same page; for
    those the executor waits for the marker to turn active instead of waiting
    for a navigation.
    """

    marker_attribute: str = "data-tab"

    kind: ClassVar[ActionKind] = ActionKind.CLICK

    async def execute(self, page: Page, selector: str) -> ActionResult:
        logger.info("Action: %s (selector=%s)", self.name, selector)
        before = page.url
        element = page.locator(selector).first
        try:
            if await element.count() == 0:
                logger.warning("Element not found: %s", selector)
                return ActionResult(success=False, message=f"element not found: {selector}")

            marker = await element.get_attribute(self.marker_attribute)
            await element.scroll_into_view_if_needed(timeout=CLICK_TIMEOUT_MS)
            await page.wait_for_timeout(SCROLL_SETTLE_MS)
            await click_with_retry(element)

            if marker:
                # best-effort: a panel that never reports active is still a click
                if not await wait_for_marker_active(page, self.marker_attribute, marker):
                    logger.debug("Panel %s=%s did not report an active state", self.marker_attribute, marker)
            else:
                # best-effort: pages with long-polling never reach network idle
                await wait_for_network_settled(page)
        except PlaywrightError as e:
            logger.error("Action %s failed: %s", self.name, e)
            return ActionResult(success=False, message=f"error: {e}")

        current = page.url
        if marker and current == before:
            logger.info("Panel switched: %s (%s=%s)", self.name, self.marker_attribute, marker)
            return ActionResult(success=True, message=f"switched panel {self.name}", location=current)
        logger.info("Navigation: %s -> %s", self.name, current)
        return ActionResult(success=True, message=f"clicked {self.name}", location=current)


@dataclass(frozen=True, eq=False)
class TabAction(ClickAction):
    """Click on an ARIA tab; the panel it controls identifies the state change."""

    marker_attribute: str = "aria-controls"

    kind: ClassVar[ActionKind] = ActionKind.TAB
