from __future__ import annotations

"""The walk loop: resolve, filter, select, execute, record, repeat."""

import asyncio
import logging
import os
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .action_filter import filter_executable, find_visible_locator
from .action_selector import ActionSelector, SelectionMode
from .actions import ActionResult
from .base_key import BaseKeyDeriver
from .browser import BrowserSession
from .catalog import DEFAULT_CATALOG, ActionCatalog
from .config import WalkConfig
from .errors import WalkError
from .highlight import ActionHighlighter
from .resolver import ActionResolver
from .walk_trace import WalkTrace

logger = logging.getLogger(__name__)


class HaltReason(str, Enum):
    MAX_STEPS = "max_steps"
    MAX_VISITED_LOCATIONS = "max_visited_locations"
    NO_APPLICABLE_ACTIONS = "no_applicable_actions"
    NO_EXECUTABLE_ACTIONS = "no_executable_actions"
    NO_SELECTION = "no_selection"
    ERROR = "error"


@dataclass(frozen=True)
class StepRecord:
    step: int
    location: str
    base: str
    action: str
    result: ActionResult


@dataclass
class WalkSummary:
    steps: int
    visited_locations: List[str]
    halt_reason: Optional[HaltReason]
    records: List[StepRecord] = field(default_factory=list)

    @property
    def failures(self) -> int:
        return sum(1 for r in self.records if not r.result.success)


class RandomWalker:
    """Drives one page through catalog actions until a stop condition fires.

    All walk state (visited locations, step count, per-base history) belongs to
    the instance and is rebuilt empty at the start of every `walk`.
    """

    def __init__(
        self,
        session: BrowserSession,
        config: WalkConfig | None = None,
        catalog: ActionCatalog | None = None,
        rng: random.Random | None = None,
        base_keys: BaseKeyDeriver | None = None,
    ) -> None:
        self.session = session
        self.config = config or WalkConfig()
        self._rng = rng or random.Random()
        self._resolver = ActionResolver(catalog or DEFAULT_CATALOG)
        mode = SelectionMode.RANDOM if self.config.random_order else SelectionMode.SEQUENTIAL
        self._selector = ActionSelector(mode, self._rng)
        self._base_keys = base_keys or BaseKeyDeriver()
        self._highlighter = ActionHighlighter() if self.config.animate else None
        self._reset()

    def _reset(self) -> None:
        # dict keeps insertion order, used as an ordered set
        self._visited: Dict[str, None] = {}
        self._step_count: int = 0
        self._history: Dict[str, Set[str]] = {}
        self._records: List[StepRecord] = []
        self.trace = WalkTrace()
        self.halt_reason: Optional[HaltReason] = None

    # ------------------------------------------------------------------
    @property
    def visited_locations(self) -> List[str]:
        return list(self._visited)

    @property
    def step_count(self) -> int:
        return self._step_count

    def history_for(self, base: str) -> FrozenSet[str]:
        return frozenset(self._history.get(base, ()))

    def summary(self) -> WalkSummary:
        return WalkSummary(
            steps=self._step_count,
            visited_locations=self.visited_locations,
            halt_reason=self.halt_reason,
            records=list(self._records),
        )

    # ------------------------------------------------------------------
    async def walk(self, start_url: str) -> WalkSummary:
        """Walk from `start_url` until a stop condition fires.

        Errors from navigation or execution are logged, trigger a diagnostic
        screenshot, and surface as `WalkError` (the cause chained).
        """
        self._reset()
        logger.info(
            "Starting walk from %s (max_steps=%d, mode=%s)",
            start_url,
            self.config.max_steps,
            self._selector.mode.value,
        )
        try:
            await self.session.navigate(start_url)
            self._visited[start_url] = None
            self.trace.add_location(start_url)
            self.halt_reason = await self._run()
        except Exception as e:
            self.halt_reason = HaltReason.ERROR
            logger.exception("Walk aborted after %d steps", self._step_count)
            await self._capture_error_screenshot()
            if isinstance(e, WalkError):
                raise
            raise WalkError(f"walk aborted after {self._step_count} steps: {e}") from e
        finally:
            if self.config.output_dir:
                self.trace.save(self.config.output_dir)

        logger.info(
            "Walk finished: steps=%d visited=%d reason=%s",
            self._step_count,
            len(self._visited),
            self.halt_reason.value,
        )
        return self.summary()

    async def _run(self) -> HaltReason:
        while self._step_count < self.config.max_steps:
            page = self.session.page
            location = page.url
            title = await self._title(page)
            logger.info("Step %d/%d: %s", self._step_count + 1, self.config.max_steps, location)

            candidates = self._resolver.resolve(location, title)
            if not candidates:
                logger.warning("No applicable actions for %s", location)
                return HaltReason.NO_APPLICABLE_ACTIONS

            executable = await filter_executable(page, candidates)
            logger.debug("Executable actions: %s", [a.name for a in executable])
            if not executable:
                logger.warning("None of %d actions is executable on %s", len(candidates), location)
                return HaltReason.NO_EXECUTABLE_ACTIONS

            base = self._base_keys.derive(location)
            history = self._history.setdefault(base, set())
            selection = self._selector.select(executable, base, history)
            if selection is None:
                logger.warning("Selector returned no action")
                return HaltReason.NO_SELECTION
            action = selection.action
            if selection.exhausted:
                logger.info("Every action tried at %s – starting over", base)
                history.clear()

            selector = await find_visible_locator(page, action)
            if selector is None:
                logger.warning("No visible locator for %s", action.name)
                self._step_count += 1
                continue

            wait_ms = self._rng.randint(self.config.min_wait_ms, self.config.max_wait_ms)
            logger.info("Waiting %dms before %s", wait_ms, action.name)
            await asyncio.sleep(wait_ms / 1000)

            if self._highlighter is not None:
                await self._highlighter.highlight(page, selector)
            result = await action.execute(page, selector)
            if self._highlighter is not None:
                await self._highlighter.clear(page)

            self._step_count += 1
            self._records.append(StepRecord(self._step_count, location, base, action.name, result))
            self.trace.record_step(self._step_count, location, action, result)
            # recorded even on failure so sequential mode always moves on
            history.add(action.name)

            if not result.success:
                logger.warning("Action failed: %s (%s)", action.name, result.message)
                continue

            new_location = result.location
            if new_location and new_location != location and new_location not in self._visited:
                if len(self._visited) >= self.config.max_visited_locations:
                    logger.info("Visited-location limit (%d) reached", self.config.max_visited_locations)
                    return HaltReason.MAX_VISITED_LOCATIONS
                self._visited[new_location] = None

        return HaltReason.MAX_STEPS

    async def _title(self, page: Page) -> str:
        try:
            return await page.title()
        except PlaywrightError:
            return ""

    async def _capture_error_screenshot(self) -> Optional[str]:
        if not self.config.screenshot_dir:
            return None
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        path = os.path.join(self.config.screenshot_dir, f"error-{timestamp}.png")
        return await self.session.screenshot(path)
