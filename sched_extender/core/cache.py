"""In-memory node cache shared by the node lister and the ranking engine.

Two slots are kept: the last observed ready-node names and the last best node
together with the node set it was computed from. Nothing expires on a timer; a
cached best node is simply ignored once the node set it belongs to no longer
matches. Set equality is used, so ``["a", "b"]`` and ``["b", "a"]`` are the
same snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sched_shared.schemas import Node

logger = logging.getLogger(__name__)


def _snapshot(nodes: Iterable[str]) -> frozenset[str]:
    return frozenset(nodes)


@dataclass(slots=True)
class NodeCache:
    """Owner-scoped cache; create one per engine/lister pair."""

    _ready_nodes: list[str] | None = field(init=False, default=None)
    _best_nodes: frozenset[str] | None = field(init=False, default=None)
    _best: Node | None = field(init=False, default=None)

    def get_ready_nodes(self) -> list[str] | None:
        if self._ready_nodes is None:
            return None
        return list(self._ready_nodes)

    def set_ready_nodes(self, nodes: Iterable[str]) -> bool:
        """Store the observed ready set. Returns True when it changed."""
        nodes = list(nodes)
        changed = self._ready_nodes is None or _snapshot(self._ready_nodes) != _snapshot(nodes)
        self._ready_nodes = nodes
        if changed and self._best_nodes is not None and self._best_nodes != _snapshot(nodes):
            logger.debug("Ready node set changed, dropping cached best node")
            self._best_nodes = None
            self._best = None
        return changed

    def get_best(self, nodes: Iterable[str]) -> Node | None:
        """Return the cached best node if it was computed from ``nodes``."""
        if self._best is None or self._best_nodes != _snapshot(nodes):
            return None
        return self._best

    def set_best(self, nodes: Iterable[str], node: Node) -> None:
        self._best_nodes = _snapshot(nodes)
        self._best = node

    def invalidate(self) -> None:
        self._ready_nodes = None
        self._best_nodes = None
        self._best = None
