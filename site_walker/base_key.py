from __future__ import annotations

"""Group locations that belong to one logical unit (e.g. one shop) under a base key."""

import re
from typing import Optional, Pattern

# canonical opaque ID token: a UUID anywhere in the location
DEFAULT_ID_PATTERN = re.compile(
    r"(?<![0-9A-Fa-f])[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}(?![0-9A-Fa-f])"
)
# detail page shape; group 1 is everything up to and including the detail segment
DEFAULT_DETAIL_PATTERN = re.compile(r"^(.*?/shop-detail/[^/?#]+)")


class BaseKeyDeriver:
    def __init__(
        self,
        id_pattern: Optional[Pattern[str]] = DEFAULT_ID_PATTERN,
        detail_pattern: Optional[Pattern[str]] = DEFAULT_DETAIL_PATTERN,
    ) -> None:
        self._id_pattern = id_pattern
        self._detail_pattern = detail_pattern

    def derive(self, location: str) -> str:
        if self._id_pattern is not None:
            m = self._id_pattern.search(location)
            if m:
                return m.group(0).lower()
        if self._detail_pattern is not None:
            m = self._detail_pattern.search(location)
            if m:
                return m.group(1)
        return location
