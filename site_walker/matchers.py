from __future__ import annotations

"""Location matchers used by catalog rules and per-action exclusions."""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Union


@dataclass(frozen=True)
class TextMatcher:
    """Literal match: fires when `text` occurs in the location or the title."""

    text: str

    def matches(self, location: str, title: Optional[str] = None) -> bool:
        if self.text in location:
            return True
        return bool(title) and self.text in title

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class PatternMatcher:
    """Regular expression searched in the location, then in the title."""

    pattern: Pattern[str]

    @classmethod
    def compile(cls, pattern: str, flags: int = 0) -> "PatternMatcher":
        return cls(re.compile(pattern, flags))

    def matches(self, location: str, title: Optional[str] = None) -> bool:
        if self.pattern.search(location):
            return True
        return bool(title) and self.pattern.search(title) is not None

    def __str__(self) -> str:
        return f"/{self.pattern.pattern}/"


LocationMatcher = Union[TextMatcher, PatternMatcher]
