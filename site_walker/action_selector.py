from __future__ import annotations

"""Selection policy: pick the next action among the executable candidates."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Optional, Sequence

from .actions import Action


class SelectionMode(str, Enum):
    RANDOM = "random"
    SEQUENTIAL = "sequential"


@dataclass(frozen=True)
class Selection:
    action: Action
    # sequential mode ran out of untried actions: the caller must clear the
    # history bucket for this base before recording the new attempt
    exhausted: bool = False


class ActionSelector:
    """Required-first selector, random or sequential.

    The selector only reads history; the walker owns and updates it.
    """

    def __init__(self, mode: SelectionMode = SelectionMode.RANDOM, rng: Optional[random.Random] = None) -> None:
        self.mode = mode
        self._rng = rng or random.Random()

    def select(
        self,
        candidates: Sequence[Action],
        base: str,
        history: AbstractSet[str] = frozenset(),
    ) -> Optional[Selection]:
        """Return the next action for the page grouped under `base`.

        1. If any candidate is required, only required candidates compete.
        2. Random mode picks uniformly among them.
        3. Sequential mode takes the first one (catalog order) not yet in
           `history`; when all were tried the bucket is exhausted and the
           first candidate wins again.
        """
        if not candidates:
            return None

        pool: List[Action] = [a for a in candidates if a.required] or list(candidates)

        if self.mode == SelectionMode.RANDOM:
            return Selection(self._rng.choice(pool))

        untried = [a for a in pool if a.name not in history]
        if untried:
            return Selection(untried[0])
        return Selection(pool[0], exhausted=True)
