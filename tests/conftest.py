"""Shared fakes for the extender test-suite."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from sched_shared.errors import BackendError, NoDataFound
from sched_extender.core.cache import NodeCache


class FakeFetcher:
    """In-memory metric source keyed by short host name."""

    def __init__(self, values: dict[str, float] | None = None, failures: dict[str, Exception] | None = None, delay: float = 0.0):
        self.values = values or {}
        self.failures = failures or {}
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_metric(self, host: str) -> float:
        self.calls.append(host)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if host in self.failures:
                raise self.failures[host]
            if host not in self.values:
                raise NoDataFound(host)
            return self.values[host]
        finally:
            self.in_flight -= 1


def node_item(name: str, ready: str = "True") -> dict[str, Any]:
    return {
        "metadata": {"name": name},
        "status": {
            "conditions": [
                {"type": "MemoryPressure", "status": "False"},
                {"type": "Ready", "status": ready},
            ]
        },
    }


def host_from_query(request: httpx.Request) -> str:
    body = json.loads(request.content)
    return body["filter"].split("'")[1]


class FakeCluster:
    """MockTransport handler emulating the API server and the telemetry backend."""

    def __init__(
        self,
        nodes: list[dict[str, Any]],
        metrics: dict[str, Any],
        statuses: dict[str, int] | None = None,
        binding_status: int = 201,
    ):
        self.nodes = nodes
        self.metrics = metrics
        self.statuses = statuses or {}
        self.binding_status = binding_status
        self.telemetry_calls: list[str] = []
        self.bindings: list[tuple[str, dict[str, Any]]] = []
        self.pending_pods: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/v1/nodes":
            return httpx.Response(200, json={"items": self.nodes})
        if path == "/api/v1/pods":
            return httpx.Response(200, json={"items": self.pending_pods})
        if path == "/api/data":
            host = host_from_query(request)
            self.telemetry_calls.append(host)
            if host in self.statuses:
                return httpx.Response(self.statuses[host])
            value = self.metrics.get(host)
            if value is None:
                return httpx.Response(200, json={"data": []})
            return httpx.Response(200, json={"data": [{"d": [value]}]})
        if path.endswith("/binding"):
            self.bindings.append((path, json.loads(request.content)))
            return httpx.Response(self.binding_status, json={"kind": "Status"})
        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def cache() -> NodeCache:
    return NodeCache()


@pytest.fixture
def backend_error() -> BackendError:
    return BackendError("metric data response: 500 Internal Server Error")
