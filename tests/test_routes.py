from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

from sched_extender.config import SchedulerConfig
from sched_extender.main import build_app

from .conftest import FakeCluster, node_item


def make_app(cluster: FakeCluster, **overrides):
    config = SchedulerConfig(
        telemetry_url="http://telemetry.local",
        kube_api_url="http://kube.local",
        lower_is_better=overrides.pop("lower_is_better", True),
        **overrides,
    )
    return build_app(config, http_client=cluster.client())


def default_cluster(**kwargs) -> FakeCluster:
    return FakeCluster(
        nodes=[node_item("n1.example"), node_item("n2.example")],
        metrics={"n1": 10.0, "n2": 20.0},
        **kwargs,
    )


def test_health():
    client = TestClient(make_app(default_cluster()))
    assert client.get("/health").json() == {"status": "ok"}


def test_nodes_lists_ready_nodes():
    cluster = default_cluster()
    cluster.nodes.append(node_item("n3.example", ready="False"))
    client = TestClient(make_app(cluster))
    assert client.get("/nodes").json() == {"nodes": ["n1.example", "n2.example"]}


def test_rank_returns_best_and_ordering():
    client = TestClient(make_app(default_cluster(), lower_is_better=False))
    response = client.post("/rank", json={"nodes": ["n1.example", "n2.example"]})
    assert response.status_code == 200
    body = response.json()
    assert body["best"]["name"] == "n2.example"
    assert [n["name"] for n in body["ranked"]] == ["n1.example", "n2.example"]
    assert body["cached"] is False

    again = client.post("/rank", json={"nodes": ["n2.example", "n1.example"]}).json()
    assert again["cached"] is True


def test_rank_reports_failed_nodes():
    cluster = default_cluster(statuses={"n1": 500})
    client = TestClient(make_app(cluster))
    body = client.post("/rank", json={"nodes": ["n1.example", "n2.example"]}).json()
    assert body["best"]["name"] == "n2.example"
    assert body["failed"][0]["name"] == "n1.example"


def test_rank_empty_list():
    client = TestClient(make_app(default_cluster()))
    response = client.post("/rank", json={"nodes": []})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "empty_node_list"


def test_rank_no_node_found():
    cluster = default_cluster(statuses={"n1": 500, "n2": 500})
    client = TestClient(make_app(cluster))
    response = client.post("/rank", json={"nodes": ["n1.example", "n2.example"]})
    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "no_node_found"


def test_schedule_binds_pod():
    cluster = default_cluster()
    client = TestClient(make_app(cluster))
    response = client.post("/schedule", json={"pod_name": "web-1", "namespace": "shop"})
    assert response.status_code == 200
    assert response.json() == {
        "pod_name": "web-1",
        "namespace": "shop",
        "node": "n1.example",
        "metric": 10.0,
        "binding_status": 201,
    }
    assert cluster.bindings[0][0] == "/api/v1/namespaces/shop/pods/web-1/binding"


def test_schedule_without_ready_nodes():
    client = TestClient(make_app(FakeCluster(nodes=[], metrics={})))
    response = client.post("/schedule", json={"pod_name": "web-1"})
    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "empty_node_list"


def test_schedule_binding_transport_failure():
    cluster = default_cluster()

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/binding"):
            raise httpx.ConnectError("api server gone", request=request)
        return cluster(request)

    config = SchedulerConfig(telemetry_url="http://telemetry.local", kube_api_url="http://kube.local")
    app = build_app(config, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    response = TestClient(app).post("/schedule", json={"pod_name": "web-1"})
    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "binding_failed"


def test_schedule_validation():
    client = TestClient(make_app(default_cluster()))
    assert client.post("/schedule", json={}).status_code == 422


def test_schedule_with_malformed_node_list():
    client = TestClient(make_app(FakeCluster(nodes=["oops"], metrics={})))
    response = client.post("/schedule", json={"pod_name": "web-1"})
    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "empty_node_list"
