"""Site Walker: randomized, catalog-driven walks through a web application.

The walker picks the actions that apply to the current page, keeps those whose
targets are visible, chooses one, runs it through Playwright and repeats until
its budget runs out or nothing is left to do.

Key sub-modules:

matchers.py        – Literal and regular-expression location matchers.
actions.py         – Action descriptors, results and the shared click executor.
target_search.py   – Multi-strategy "find the target listing" action.
catalog.py         – Location rules and the default action catalog.
resolver.py        – Location (URL/title) to ordered, duplicate-free actions.
action_filter.py   – Visibility probes deciding which actions can run.
action_selector.py – Required-first random / sequential selection policy.
base_key.py        – Grouping of sub-pages under one history bucket.
walker.py          – The walk loop and its state.
walk_trace.py      – networkx record of the walk, exported as JSON/GraphML.
browser.py         – Playwright session bootstrap, navigation with retry.
config.py / proxy.py – Environment driven settings.
"""

from .actions import Action, ActionKind, ActionResult, ClickAction, TabAction
from .action_selector import ActionSelector, Selection, SelectionMode
from .base_key import BaseKeyDeriver
from .browser import BrowserSession
from .catalog import DEFAULT_CATALOG, ActionCatalog, LocationRule
from .config import BrowserConfig, WalkConfig
from .errors import NavigationError, WalkError
from .matchers import PatternMatcher, TextMatcher
from .resolver import ActionResolver
from .target_search import FindTargetAction
from .walker import HaltReason, RandomWalker, WalkSummary

__all__ = [
    "Action",
    "ActionKind",
    "ActionResult",
    "ClickAction",
    "TabAction",
    "FindTargetAction",
    "ActionSelector",
    "Selection",
    "SelectionMode",
    "BaseKeyDeriver",
    "BrowserSession",
    "ActionCatalog",
    "LocationRule",
    "DEFAULT_CATALOG",
    "ActionResolver",
    "BrowserConfig",
    "WalkConfig",
    "NavigationError",
    "WalkError",
    "PatternMatcher",
    "TextMatcher",
    "HaltReason",
    "RandomWalker",
    "WalkSummary",
]
