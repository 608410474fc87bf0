"""Concurrent metric ranking of candidate nodes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sched_shared.errors import EmptyNodeList, NoNodeFound
from sched_shared.metrics import MetricFetcher
from sched_shared.schemas import Node, RankResponse

from .cache import NodeCache

logger = logging.getLogger(__name__)


def short_host(node_name: str) -> str:
    """Node name up to its first domain separator."""
    return node_name.split(".", 1)[0]


def sort_nodes(nodes: Sequence[Node]) -> list[Node]:
    """Order successful nodes by metric ascending, then by name."""
    return sorted((n for n in nodes if n.ok), key=lambda n: (n.metric, n.name))


def select_best(ranked: Sequence[Node], lower_is_better: bool) -> Node:
    if not ranked:
        raise NoNodeFound()
    best = ranked[0] if lower_is_better else ranked[-1]
    if best.metric is None:
        raise NoNodeFound()
    return best


@dataclass(slots=True)
class RankingEngine:
    """Picks the best node for a candidate set using one metric per node.

    Only one ranking pass runs at a time per engine; the lock covers the cache
    check, the fan-out and the cache write.
    """

    fetcher: MetricFetcher
    cache: NodeCache
    lower_is_better: bool = True
    max_concurrency: int = 16
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)

    async def best_node(self, nodes: Sequence[str]) -> Node:
        result = await self.rank(nodes)
        return result.best

    async def rank(self, nodes: Sequence[str]) -> RankResponse:
        """Run one ranking pass, or serve it from the cache."""
        nodes = list(nodes)
        async with self._lock:
            if not nodes:
                raise EmptyNodeList()

            cached = self.cache.get_best(nodes)
            if cached is not None:
                logger.info("Using cached best node %s", cached.name)
                return RankResponse(best=cached, cached=True)

            results = await self._collect(nodes)
            failed = [n for n in results if not n.ok]
            for node in failed:
                logger.warning('Error retrieving node "%s": "%s"', node.name, node.error)

            ranked = sort_nodes(results)
            best = select_best(ranked, self.lower_is_better)
            self.cache.set_best(nodes, best)
            logger.info(
                "Selected node %s (metric=%s) among %d candidates, %d failed",
                best.name,
                best.metric,
                len(nodes),
                len(failed),
            )
            return RankResponse(best=best, ranked=ranked, failed=failed)

    async def _collect(self, nodes: Sequence[str]) -> list[Node]:
        semaphore = asyncio.Semaphore(max(1, self.max_concurrency))

        async def _query(name: str) -> Node:
            async with semaphore:
                value = await self.fetcher.get_metric(short_host(name))
            return Node(name=name, metric=value)

        outcomes = await asyncio.gather(*(_query(name) for name in nodes), return_exceptions=True)
        results: list[Node] = []
        for name, outcome in zip(nodes, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                results.append(Node(name=name, error=str(outcome) or type(outcome).__name__))
            else:
                results.append(outcome)
        return results
