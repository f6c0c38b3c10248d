from __future__ import annotations

"""Record of one walk: a multigraph of location transitions keyed by step."""

import json
import logging
import os
from typing import Any, Dict, List, Tuple

import networkx as nx

from .actions import Action, ActionResult

logger = logging.getLogger(__name__)


class WalkTrace:
    """Directed multigraph: nodes are locations, one edge per executed step."""

    def __init__(self) -> None:
        self._g: nx.MultiDiGraph = nx.MultiDiGraph()
        self._steps: List[Dict[str, Any]] = []

    def add_location(self, location: str) -> None:
        if location not in self._g:
            self._g.add_node(location)

    def record_step(self, step: int, source: str, action: Action, result: ActionResult) -> None:
        target = result.location or source
        self.add_location(source)
        self.add_location(target)
        self._g.add_edge(
            source,
            target,
            key=step,
            action=action.name,
            kind=action.kind.value,
            success=result.success,
            message=result.message,
        )
        self._steps.append(
            {
                "step": step,
                "from": source,
                "to": target,
                "action": action.name,
                "success": result.success,
                "message": result.message,
            }
        )

    @property
    def steps(self) -> List[Dict[str, Any]]:
        return list(self._steps)

    def transitions(self) -> List[Tuple[str, str, str]]:
        """(source, target, action name) per step, in execution order."""
        edges = sorted(self._g.edges(keys=True, data=True), key=lambda e: e[2])
        return [(u, v, data["action"]) for u, v, _, data in edges]

    def to_networkx(self) -> nx.MultiDiGraph:
        return self._g

    def to_json(self) -> Dict[str, Any]:
        return {
            "locations": list(self._g.nodes),
            "steps": self.steps,
        }

    # ------------------------------------------------------------------
    def save(self, output_dir: str) -> None:
        """Write ``walk_trace.json`` and ``walk_trace.graphml``; failures only warn."""
        try:
            os.makedirs(output_dir, exist_ok=True)
            with open(os.path.join(output_dir, "walk_trace.json"), "w", encoding="utf-8") as fh:
                json.dump(self.to_json(), fh, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning("Failed to write walk_trace.json: %s", e)
            return

        try:
            nx.write_graphml(self._g, os.path.join(output_dir, "walk_trace.graphml"))
        except (OSError, nx.NetworkXError) as e:
            logger.warning("Failed to write GraphML: %s", e)
