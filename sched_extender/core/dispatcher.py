"""Dispatcher coordinating node discovery, ranking and binding for one pod."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sched_shared.kube_client import KubeClient
from sched_shared.schemas import DEFAULT_NAMESPACE, ScheduleDecision

from .nodes import NodeLister
from .ranking import RankingEngine

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Dispatcher:
    """Orchestrates the placement workflow: list, rank, bind."""

    lister: NodeLister
    engine: RankingEngine
    kube: KubeClient

    async def schedule(self, pod_name: str, namespace: str = "") -> ScheduleDecision:
        namespace = namespace or DEFAULT_NAMESPACE
        nodes = await self.lister.ready_nodes()
        best = await self.engine.best_node(nodes)

        response = await self.kube.create_binding(pod_name, best.name, namespace)
        if response.is_success:
            logger.info("Bound pod %s/%s to %s", namespace, pod_name, best.name)
        else:
            logger.warning(
                "Binding pod %s/%s to %s returned %s",
                namespace,
                pod_name,
                best.name,
                response.status_code,
            )
        return ScheduleDecision(
            pod_name=pod_name,
            namespace=namespace,
            node=best.name,
            metric=best.metric,
            binding_status=response.status_code,
        )
