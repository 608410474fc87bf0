"""Shared data contracts for the scheduler extender.

These models are colocated so the HTTP surface, the ranking engine and the
Kubernetes client agree on payload formats. They double as documentation for
the API surface.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, constr

DEFAULT_NAMESPACE = "default"


class ErrorCode(str, Enum):
    """Enumerates well-known error categories for HTTP responses."""

    EMPTY_NODE_LIST = "empty_node_list"
    NO_NODE_FOUND = "no_node_found"
    BINDING_FAILED = "binding_failed"


class ErrorResponse(BaseModel):
    """Consistent error envelope returned by the extender."""

    code: ErrorCode
    message: str


class Node(BaseModel):
    """A candidate node and the outcome of its metric query.

    Exactly one of ``metric`` and ``error`` is set after a ranking pass. A node
    carrying an error never takes part in selection.
    """

    name: str
    metric: float | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.metric is not None


class RankRequest(BaseModel):
    """Candidate node names submitted for ranking."""

    nodes: list[str] = Field(default_factory=list)


class RankResponse(BaseModel):
    """Result of one ranking pass."""

    best: Node
    ranked: list[Node] = Field(
        default_factory=list, description="Successful nodes sorted by metric ascending."
    )
    failed: list[Node] = Field(
        default_factory=list, description="Nodes whose metric query failed."
    )
    cached: bool = Field(default=False, description="True when served from the cache.")


class PodRef(BaseModel):
    """Identifies a pod awaiting placement."""

    name: constr(strip_whitespace=True, min_length=1)
    namespace: str = DEFAULT_NAMESPACE


class ScheduleRequest(BaseModel):
    """Payload for an explicit scheduling request."""

    pod_name: constr(strip_whitespace=True, min_length=1)
    namespace: str = ""


class ScheduleDecision(BaseModel):
    """Outcome of placing one pod."""

    pod_name: str
    namespace: str
    node: str
    metric: float | None = None
    binding_status: int = Field(description="HTTP status returned by the binding call.")


class NodeListResponse(BaseModel):
    """Ready nodes currently known to the extender."""

    nodes: list[str] = Field(default_factory=list)
