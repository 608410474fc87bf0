"""Ready-node discovery backed by the shared node cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from sched_shared.kube_client import KubeClient, ready_node_names

from .cache import NodeCache

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NodeLister:
    """Lists nodes whose Ready condition is True and records them in the cache."""

    kube: KubeClient
    cache: NodeCache

    async def ready_nodes(self) -> list[str]:
        """Never raises; listing failures degrade to an empty list."""
        previous = self.cache.get_ready_nodes()
        try:
            ready = ready_node_names(await self.kube.list_nodes())
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Listing nodes failed: %s", exc)
            return []

        if self.cache.set_ready_nodes(ready) and previous is not None:
            logger.info("Ready nodes changed: %s -> %s", previous, ready)
        return ready
