from __future__ import annotations

"""Runtime configuration for the walker and the browser session.

Values are plain dataclasses; `from_env` readers honour a local `.env` file.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv

from .proxy import ProxySettings, load_proxy_settings

DEFAULT_START_URL = "https://www.esthe-ranking.jp/funabashi/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _load_env() -> None:
    # the .env of the directory the walker is started from, not of the package
    load_dotenv(find_dotenv(usecwd=True))


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class WalkConfig:
    """Budget and pacing of one walk."""

    max_steps: int = 50
    min_wait_ms: int = 1000
    max_wait_ms: int = 3000
    random_order: bool = True
    max_visited_locations: int = 20
    screenshot_dir: Optional[str] = "./screenshots"
    output_dir: Optional[str] = "run_artifacts"
    animate: bool = False

    def __post_init__(self) -> None:
        if self.max_steps <= 0:
            raise ValueError("max_steps must be positive")
        if self.max_visited_locations <= 0:
            raise ValueError("max_visited_locations must be positive")
        if self.min_wait_ms < 0 or self.max_wait_ms < 0:
            raise ValueError("wait times must not be negative")
        if self.min_wait_ms > self.max_wait_ms:
            raise ValueError(
                f"min_wait_ms ({self.min_wait_ms}) must not exceed max_wait_ms ({self.max_wait_ms})"
            )

    @classmethod
    def from_env(cls) -> "WalkConfig":
        _load_env()
        return cls(
            max_steps=env_int("MAX_STEPS", 50),
            min_wait_ms=env_int("MIN_WAIT_TIME", 1000),
            max_wait_ms=env_int("MAX_WAIT_TIME", 3000),
            random_order=env_bool("RANDOM_ORDER", True),
            max_visited_locations=env_int("MAX_VISITED_URLS", 20),
            screenshot_dir=os.getenv("SCREENSHOT_DIR", "./screenshots") or None,
            output_dir=os.getenv("OUTPUT_DIR", "run_artifacts") or None,
        )


@dataclass
class BrowserConfig:
    headless: bool = False
    viewport: Dict[str, int] = field(default_factory=lambda: {"width": 1920, "height": 1080})
    user_agent: str = DEFAULT_USER_AGENT
    # default timeout (ms) applied to every page operation without its own bound
    timeout_ms: int = 30000
    channel: Optional[str] = "chrome"
    proxy: Optional[ProxySettings] = None

    @classmethod
    def from_env(cls) -> "BrowserConfig":
        _load_env()
        return cls(
            headless=env_bool("HEADLESS", False),
            channel=os.getenv("BROWSER_CHANNEL", "chrome") or None,
            proxy=load_proxy_settings(),
        )


def start_url_from_env() -> str:
    _load_env()
    return os.getenv("START_URL") or DEFAULT_START_URL
