from __future__ import annotations

"""Static registry of location rules and the actions that apply to them.

Rules carry an explicit `priority`: the resolver walks matching rules from the
highest priority down, so narrow page shapes must be declared with a higher
priority than broad fallbacks.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from .actions import Action, ClickAction
from .matchers import LocationMatcher, PatternMatcher
from .target_search import FindTargetAction


@dataclass(frozen=True)
class LocationRule:
    matcher: LocationMatcher
    actions: Tuple[Action, ...]
    priority: int = 0
    description: str = ""


class ActionCatalog:
    """Immutable ordered collection of `LocationRule`s."""

    def __init__(self, rules: Sequence[LocationRule]) -> None:
        self._rules: Tuple[LocationRule, ...] = tuple(rules)
        for rule in self._rules:
            names = [a.name for a in rule.actions]
            if len(names) != len(set(names)):
                raise ValueError(f"duplicate action names in rule {rule.matcher}: {names}")

    @property
    def rules(self) -> Tuple[LocationRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[LocationRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


# ----------------------------------------------------------------------
# Default catalog: MONROE Funabashi on esthe-ranking.jp -----------------

SHOP_DETAIL = PatternMatcher.compile(r"shop-detail")

FIND_MONROE = FindTargetAction(
    name="MONROE（モンロー）船橋店を探す",
    locators=(
        "text=MONROE（モンロー） 船橋店",
        "text=MONROE 船橋店",
        "text=モンロー 船橋店",
        'a:has-text("MONROE")',
        'a:has-text("モンロー")',
    ),
    description="Find the MONROE Funabashi listing on the ranking page and open it",
    skip_on=SHOP_DETAIL,
    search_terms=(
        "MONROE（モンロー） 船橋店",
        "MONROE 船橋店",
        "モンロー 船橋店",
        "MONROE（モンロー）",
        "MONROE",
        "モンロー",
    ),
    keywords=("MONROE", "モンロー"),
)

MONROE_SHOP_ACTIONS: Tuple[Action, ...] = (
    ClickAction(
        name="店舗トップ",
        locators=('a:has-text("店舗トップ")', "text=店舗トップ", '[href*="top"]'),
        description="Shop top page",
    ),
    ClickAction(
        name="ニュース セラピスト",
        locators=(
            'a:has-text("ニュース セラピスト")',
            "text=ニュース セラピスト",
            '[href*="news"]',
            '[href*="therapist"]',
        ),
        description="News / therapist page",
    ),
    ClickAction(
        name="セラピスト動画",
        locators=(
            'a:has-text("セラピスト動画")',
            "text=セラピスト動画",
            '[href*="video"]',
            '[href*="movie"]',
        ),
        description="Therapist video page",
    ),
    ClickAction(
        name="料金システム",
        locators=(
            'a:has-text("料金システム")',
            "text=料金システム",
            '[href*="price"]',
            '[href*="fee"]',
        ),
        description="Price list page",
    ),
    ClickAction(
        name="アクセス",
        locators=('a:has-text("アクセス")', "text=アクセス", '[href*="access"]'),
        description="Access / map page",
    ),
    ClickAction(
        name="割引情報",
        locators=(
            'a:has-text("割引情報")',
            "text=割引情報",
            '[href*="discount"]',
            '[href*="coupon"]',
        ),
        description="Discount page",
    ),
    ClickAction(
        name="ネット予約",
        locators=(
            'a:has-text("ネット予約")',
            "text=ネット予約",
            '[href*="reserve"]',
            '[href*="booking"]',
            'button:has-text("予約")',
        ),
        description="Online reservation page",
    ),
)

DEFAULT_CATALOG = ActionCatalog(
    [
        LocationRule(
            matcher=PatternMatcher.compile(r"funabashi"),
            actions=(FIND_MONROE,),
            priority=0,
            description="Funabashi / Nishi-Funabashi ranking page",
        ),
        LocationRule(
            matcher=SHOP_DETAIL,
            actions=MONROE_SHOP_ACTIONS,
            priority=20,
            description="Shop detail page",
        ),
        LocationRule(
            matcher=PatternMatcher.compile(r"monroe|モンロー", re.IGNORECASE),
            actions=MONROE_SHOP_ACTIONS,
            priority=10,
            description="MONROE shop page (fallback by name)",
        ),
    ]
)
