"""
Pytest configuration and in-memory Playwright fakes shared by all tests.

`FakePage` maps selector strings to lists of `FakeElement`s. Locators built from
it honour the subset of the Playwright async API the walker uses and raise the
real `playwright.async_api` errors.
"""
import random
from typing import Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from site_walker.browser import BrowserSession
from site_walker.config import WalkConfig


class FakeElement:
    def __init__(
        self,
        visible: bool = True,
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        on_click: Optional[Callable[["FakePage"], None]] = None,
        click_errors: Optional[List[Exception]] = None,
    ):
        self.visible = visible
        self.text = text
        self.attrs = dict(attrs or {})
        self.on_click = on_click
        self.click_errors = list(click_errors or [])
        self.clicks: List[dict] = []
        self.scrolled = 0
        self.evaluated: List[str] = []
        self.parent: Optional["FakeElement"] = None
        self.children: Dict[str, List["FakeElement"]] = {}

    def add_child(self, selector: str, child: "FakeElement") -> "FakeElement":
        child.parent = self
        self.children.setdefault(selector, []).append(child)
        return child


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str, elements: List[FakeElement]):
        self._page = page
        self.selector = selector
        self._elements = elements

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._page, self.selector, self._elements[:1])

    def locator(self, selector: str) -> "FakeLocator":
        if selector == "..":
            found = [e.parent for e in self._elements if e.parent is not None]
        else:
            found = [c for e in self._elements for c in e.children.get(selector, [])]
        return FakeLocator(self._page, f"{self.selector} >> {selector}", found)

    def _one(self) -> FakeElement:
        if not self._elements:
            raise PlaywrightTimeoutError(f"Timeout exceeded waiting for {self.selector}")
        return self._elements[0]

    async def count(self) -> int:
        if self.selector in self._page.broken_selectors:
            raise PlaywrightError(f"Unexpected token in selector {self.selector}")
        return len(self._elements)

    async def all(self) -> List["FakeLocator"]:
        return [FakeLocator(self._page, self.selector, [e]) for e in self._elements]

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self._page.probes.append(self.selector)
        if not self._one().visible:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.selector}")

    async def is_visible(self, timeout: Optional[float] = None) -> bool:
        return bool(self._elements) and self._elements[0].visible

    async def scroll_into_view_if_needed(self, timeout: Optional[float] = None) -> None:
        self._one().scrolled += 1

    async def click(self, timeout: Optional[float] = None, force: bool = False) -> None:
        element = self._one()
        element.clicks.append({"timeout": timeout, "force": force})
        if element.click_errors:
            raise element.click_errors.pop(0)
        self._page.clicked.append(self.selector)
        if element.on_click is not None:
            element.on_click(self._page)

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._one().attrs.get(name)

    async def text_content(self) -> Optional[str]:
        return self._one().text

    async def evaluate(self, expression: str, arg=None):
        self._one().evaluated.append(expression)


class FakeResponse:
    def __init__(self, status: int, body: str):
        self.status = status
        self._body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        return self._body


class FakeAPIRequest:
    """`context.request`: answers are queued per URL as responses or exceptions."""

    def __init__(self):
        self.answers: Dict[str, object] = {}
        self.requested: List[str] = []

    async def get(self, url: str, timeout: Optional[float] = None) -> FakeResponse:
        self.requested.append(url)
        answer = self.answers.get(url, PlaywrightError(f"connect ECONNREFUSED {url}"))
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakeContext:
    def __init__(self):
        self.request = FakeAPIRequest()


class FakePage:
    def __init__(self, url: str = "about:blank", title: str = ""):
        self.context = FakeContext()
        self.url = url
        self._title = title
        self._elements: Dict[str, List[FakeElement]] = {}
        self.broken_selectors: set = set()
        self.goto_calls: List[dict] = []
        self.goto_errors: List[Exception] = []
        self.screenshots: List[str] = []
        self.load_states: List[str] = []
        self.waited_selectors: List[str] = []
        self.probes: List[str] = []
        self.clicked: List[str] = []
        self.evaluated: List[str] = []

    def add(self, selector: str, element: Optional[FakeElement] = None, **kwargs) -> FakeElement:
        element = element or FakeElement(**kwargs)
        self._elements.setdefault(selector, []).append(element)
        return element

    def clear(self) -> None:
        self._elements.clear()

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector, list(self._elements.get(selector, [])))

    async def title(self) -> str:
        return self._title

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_errors:
            raise self.goto_errors.pop(0)
        self.url = url

    async def wait_for_load_state(self, state: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.load_states.append(state)

    async def wait_for_timeout(self, timeout: float) -> None:
        return None

    async def wait_for_selector(self, selector: str, timeout: Optional[float] = None, state: Optional[str] = None):
        self.waited_selectors.append(selector)
        for part in selector.split(", "):
            if any(e.visible for e in self._elements.get(part, [])):
                return None
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        self.screenshots.append(path)
        return b""

    async def evaluate(self, expression: str, arg=None):
        self.evaluated.append(expression)

    def set_default_timeout(self, timeout: float) -> None:
        pass


def navigate_to(url: str, title: str = "") -> Callable[[FakePage], None]:
    """on_click handler: the click moves the page to `url`."""

    def _go(page: FakePage) -> None:
        page.url = url
        page._title = title

    return _go


@pytest.fixture
def fake_page():
    return FakePage(url="https://example.test/funabashi/", title="Ranking")


@pytest.fixture
def session(fake_page):
    return BrowserSession(page=fake_page)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fast_config(tmp_path):
    """Walk config without pauses, writing artifacts under tmp_path."""
    return WalkConfig(
        max_steps=10,
        min_wait_ms=0,
        max_wait_ms=0,
        random_order=False,
        max_visited_locations=20,
        screenshot_dir=str(tmp_path / "screenshots"),
        output_dir=str(tmp_path / "out"),
    )
