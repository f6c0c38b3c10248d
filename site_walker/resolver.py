from __future__ import annotations

"""Resolve the actions that apply to the current page."""

import logging
from typing import List, Optional

from .actions import Action
from .catalog import ActionCatalog, LocationRule

logger = logging.getLogger(__name__)


class ActionResolver:
    def __init__(self, catalog: ActionCatalog) -> None:
        self._catalog = catalog

    def matching_rules(self, location: str, title: Optional[str] = None) -> List[LocationRule]:
        """Rules firing for the location, highest priority first.

        `sorted` is stable, so equal priorities keep declaration order.
        """
        matched = [r for r in self._catalog if r.matcher.matches(location, title)]
        return sorted(matched, key=lambda r: -r.priority)

    def resolve(self, location: str, title: Optional[str] = None) -> List[Action]:
        """Return the applicable actions, duplicate-free by name (first seen wins)."""
        actions: List[Action] = []
        seen: set[str] = set()
        for rule in self.matching_rules(location, title):
            logger.debug("Rule matched: %s (%d actions)", rule.description or rule.matcher, len(rule.actions))
            for action in rule.actions:
                if action.name in seen or not action.is_applicable(location):
                    continue
                seen.add(action.name)
                actions.append(action)
        logger.debug("Resolved %d actions for %s: %s", len(actions), location, [a.name for a in actions])
        return actions
