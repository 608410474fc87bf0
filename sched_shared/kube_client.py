"""Thin Kubernetes REST client covering node listing, pod listing and binding."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .schemas import DEFAULT_NAMESPACE, PodRef

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class KubeClient:
    """Talks to the API server directly or through ``kubectl proxy``."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    async def list_nodes(self) -> list[dict[str, Any]]:
        """Return raw node objects. Raises on transport or HTTP errors."""
        response = await self.http_client.get(self._url("/api/v1/nodes"), timeout=self.timeout)
        response.raise_for_status()
        return _items(response)

    async def list_pending_pods(self, scheduler_name: str) -> list[PodRef]:
        """Return unbound pending pods that name ``scheduler_name``."""
        selector = f"spec.schedulerName={scheduler_name},status.phase=Pending,spec.nodeName="
        response = await self.http_client.get(
            self._url("/api/v1/pods"),
            params={"fieldSelector": selector},
            timeout=self.timeout,
        )
        response.raise_for_status()
        pods: list[PodRef] = []
        for item in _items(response):
            metadata = item.get("metadata") or {}
            if not isinstance(metadata, dict) or not metadata.get("name"):
                continue
            pods.append(
                PodRef(
                    name=metadata["name"],
                    namespace=metadata.get("namespace") or DEFAULT_NAMESPACE,
                )
            )
        return pods

    async def create_binding(
        self, pod_name: str, node_name: str, namespace: str = ""
    ) -> httpx.Response:
        """Bind ``pod_name`` to ``node_name`` and return the raw response.

        The response body is not interpreted; transport errors propagate.
        """
        namespace = namespace or DEFAULT_NAMESPACE
        body = binding_payload(pod_name, node_name, namespace)
        logger.debug("Binding pod %s/%s to %s", namespace, pod_name, node_name)
        return await self.http_client.post(
            self._url(f"/api/v1/namespaces/{namespace}/pods/{pod_name}/binding"),
            json=body,
            timeout=self.timeout,
        )


def _items(response: httpx.Response) -> list[dict[str, Any]]:
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"unexpected list payload: {type(payload).__name__}")
    items = payload.get("items") or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValueError("list payload items must be objects")
    return items


def binding_payload(pod_name: str, node_name: str, namespace: str = "") -> dict[str, Any]:
    namespace = namespace or DEFAULT_NAMESPACE
    return {
        "target": {
            "kind": "Node",
            "apiVersion": "v1",
            "name": node_name,
            "namespace": namespace,
        },
        "metadata": {
            "name": pod_name,
            "namespace": namespace,
        },
    }


def ready_node_names(nodes: list[dict[str, Any]]) -> list[str]:
    """Names of nodes with a ``Ready`` condition whose status is ``"True"``."""
    ready: list[str] = []
    for node in nodes:
        metadata = node.get("metadata") or {}
        status = node.get("status") or {}
        if not isinstance(metadata, dict) or not isinstance(status, dict):
            raise ValueError("node metadata and status must be objects")
        name = metadata.get("name")
        conditions = status.get("conditions") or []
        if not isinstance(conditions, list) or not all(isinstance(c, dict) for c in conditions):
            raise ValueError(f"malformed conditions for node {name!r}")
        if name and any(
            c.get("type") == "Ready" and c.get("status") == "True" for c in conditions
        ):
            ready.append(name)
    return ready
