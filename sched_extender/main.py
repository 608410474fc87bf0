"""Entry point wiring the FastAPI application for the scheduler extender."""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI

from sched_shared.kube_client import KubeClient
from sched_shared.telemetry_client import TelemetryClient

from .api import routes
from .config import SchedulerConfig
from .core.cache import NodeCache
from .core.dispatcher import Dispatcher
from .core.nodes import NodeLister
from .core.ranking import RankingEngine
from .core.watcher import PendingPodWatcher

logger = logging.getLogger(__name__)


def build_dispatcher(config: SchedulerConfig, http_client: httpx.AsyncClient) -> Dispatcher:
    cache = NodeCache()
    kube = KubeClient(
        base_url=config.kube_api_url,
        http_client=http_client,
        timeout=config.kube_timeout,
    )
    telemetry = TelemetryClient(
        base_url=config.telemetry_url,
        http_client=http_client,
        metrics=[config.telemetry_metric],
        timeout=config.telemetry_timeout,
    )
    engine = RankingEngine(
        fetcher=telemetry,
        cache=cache,
        lower_is_better=config.lower_is_better,
        max_concurrency=config.max_concurrency,
    )
    return Dispatcher(lister=NodeLister(kube=kube, cache=cache), engine=engine, kube=kube)


def build_app(
    config: SchedulerConfig | None = None, http_client: httpx.AsyncClient | None = None
) -> FastAPI:
    """Create and configure the FastAPI instance."""
    config = config or SchedulerConfig.from_env()
    logging.basicConfig(level=config.log_level)
    app = FastAPI(title="Metric Scheduler Extender", version="0.1.0")

    http_client = http_client or httpx.AsyncClient()
    dispatcher = build_dispatcher(config, http_client)
    watcher = PendingPodWatcher(
        kube=dispatcher.kube,
        dispatcher=dispatcher,
        scheduler_name=config.scheduler_name,
        poll_interval=config.poll_interval,
    )
    app.state.dispatcher = dispatcher
    app.state.watcher = watcher

    app.include_router(routes.router)
    app.dependency_overrides[routes.get_dispatcher] = lambda: dispatcher

    @app.on_event("startup")
    async def _startup() -> None:
        logger.info(
            "Extender ready: metric=%s lower_is_better=%s",
            config.telemetry_metric,
            config.lower_is_better,
        )
        if config.watch_pending_pods:
            await watcher.startup()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await watcher.shutdown()
        await http_client.aclose()

    return app


app = build_app()
