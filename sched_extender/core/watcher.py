"""Background loop placing pending pods that belong to this scheduler."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass, field

import httpx

from sched_shared.errors import SchedulerError
from sched_shared.kube_client import KubeClient

from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PendingPodWatcher:
    """Polls the API server for unbound pods and dispatches them one by one."""

    kube: KubeClient
    dispatcher: Dispatcher
    scheduler_name: str
    poll_interval: float = 5.0
    _task: asyncio.Task | None = field(init=False, default=None)

    async def startup(self) -> None:
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(
            "Watching pending pods for scheduler %s every %.1fs",
            self.scheduler_name,
            self.poll_interval,
        )

    async def shutdown(self) -> None:
        if self._task:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def run_once(self) -> int:
        """Schedule every currently pending pod. Returns the number bound."""
        try:
            pods = await self.kube.list_pending_pods(self.scheduler_name)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Listing pending pods failed: %s", exc)
            return 0

        bound = 0
        for pod in pods:
            try:
                decision = await self.dispatcher.schedule(pod.name, pod.namespace)
            except (SchedulerError, httpx.HTTPError) as exc:
                logger.error("Scheduling pod %s/%s failed: %s", pod.namespace, pod.name, exc)
                continue
            if 200 <= decision.binding_status < 300:
                bound += 1
        return bound

    async def _poll_loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.poll_interval)
