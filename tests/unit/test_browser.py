import pytest
from playwright.async_api import Error as PlaywrightError

from conftest import FakeResponse
from site_walker.browser import IP_SERVICES, BrowserSession
from site_walker.config import BrowserConfig
from site_walker.errors import NavigationError, WalkError


def test_page_requires_launch():
    with pytest.raises(RuntimeError):
        BrowserSession(BrowserConfig()).page


@pytest.mark.asyncio
async def test_navigate_first_try(session, fake_page):
    await session.navigate("https://example.test/", timeout_ms=1234)

    assert fake_page.goto_calls == [{"url": "https://example.test/", "wait_until": "networkidle", "timeout": 1234}]
    assert fake_page.url == "https://example.test/"


@pytest.mark.asyncio
async def test_navigate_gives_up_after_retry(session, fake_page):
    fake_page.goto_errors = [PlaywrightError("net::ERR_CONNECTION_RESET") for _ in range(3)]

    with pytest.raises(NavigationError) as excinfo:
        await session.navigate("https://example.test/")

    assert isinstance(excinfo.value, WalkError)
    assert isinstance(excinfo.value.__cause__, PlaywrightError)
    assert len(fake_page.goto_calls) == 2


@pytest.mark.asyncio
async def test_screenshot_creates_directory(session, fake_page, tmp_path):
    path = str(tmp_path / "shots" / "error-1.png")

    assert await session.screenshot(path) == path
    assert (tmp_path / "shots").is_dir()
    assert fake_page.screenshots == [path]


@pytest.mark.asyncio
async def test_screenshot_without_page_is_best_effort(tmp_path):
    assert await BrowserSession().screenshot(str(tmp_path / "x.png")) is None


@pytest.mark.asyncio
async def test_current_ip_skips_failing_services(session, fake_page):
    first, second, third = IP_SERVICES
    fake_page.context.request.answers = {
        first: FakeResponse(503, "unavailable"),
        second: FakeResponse(200, " 203.0.113.7\n"),
    }

    assert await session.current_ip() == "203.0.113.7"
    assert fake_page.context.request.requested == [first, second]
    assert fake_page.goto_calls == []


@pytest.mark.asyncio
async def test_current_ip_is_none_when_every_service_fails(session, fake_page):
    assert await session.current_ip() is None
    assert fake_page.context.request.requested == list(IP_SERVICES)


class _Closable:
    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    async def close(self):
        self.calls += 1
        if self.error:
            raise self.error

    async def stop(self):
        self.calls += 1


@pytest.mark.asyncio
async def test_close_stops_driver_when_browser_close_fails(fake_page):
    session = BrowserSession(page=fake_page)
    browser = _Closable(PlaywrightError("Target page, context or browser has been closed"))
    driver = _Closable()
    session._browser = browser
    session._playwright = driver

    with pytest.raises(PlaywrightError):
        await session.close()

    assert driver.calls == 1
    with pytest.raises(RuntimeError):
        session.page
