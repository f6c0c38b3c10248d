from __future__ import annotations

"""Read-only visibility probes deciding which actions can run right now."""

import logging
from typing import List, Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .actions import VISIBILITY_TIMEOUT_MS, Action

logger = logging.getLogger(__name__)


async def probe_visible(page: Page, selector: str, timeout_ms: int = VISIBILITY_TIMEOUT_MS) -> bool:
    """True if the first element matching `selector` becomes visible within the bound.

    Timeouts, selector syntax errors and detached elements all read as False.
    """
    try:
        element = page.locator(selector).first
        if await element.count() == 0:
            return False
        await element.wait_for(state="visible", timeout=timeout_ms)
        return True
    except PlaywrightError as e:
        logger.debug("Probe %r: not visible (%s)", selector, e)
        return False


async def find_visible_locator(page: Page, action: Action) -> Optional[str]:
    """Return the first locator strategy of `action` that resolves to a visible element."""
    for selector in action.locators:
        if await probe_visible(page, selector):
            return selector
    return None


async def is_action_executable(page: Page, action: Action) -> bool:
    return await find_visible_locator(page, action) is not None


async def filter_executable(page: Page, actions: Sequence[Action]) -> List[Action]:
    """Keep executable actions, preserving their order. Probes run one at a time."""
    executable: List[Action] = []
    for action in actions:
        if await is_action_executable(page, action):
            executable.append(action)
    return executable
