"""FastAPI route definitions for the scheduler extender."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from sched_shared.errors import EmptyNodeList, NoNodeFound
from sched_shared.schemas import (
    ErrorCode,
    ErrorResponse,
    NodeListResponse,
    RankRequest,
    RankResponse,
    ScheduleDecision,
    ScheduleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher():
    """Dependency placeholder for injecting the dispatcher service."""
    raise NotImplementedError("Dispatcher dependency must be wired in main.py")


def _error(status_code: int, code: ErrorCode, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(code=code, message=message).model_dump(),
    )


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe for the extender process."""
    return {"status": "ok"}


@router.get("/nodes", response_model=NodeListResponse)
async def list_nodes(dispatcher=Depends(get_dispatcher)):
    """Ready nodes as currently reported by the API server."""
    nodes = await dispatcher.lister.ready_nodes()
    return NodeListResponse(nodes=nodes)


@router.post("/rank", response_model=RankResponse)
async def rank_nodes(payload: RankRequest, dispatcher=Depends(get_dispatcher)):
    """Rank the given candidates without binding anything."""
    try:
        return await dispatcher.engine.rank(payload.nodes)
    except EmptyNodeList as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, ErrorCode.EMPTY_NODE_LIST, str(exc)) from exc
    except NoNodeFound as exc:
        raise _error(status.HTTP_503_SERVICE_UNAVAILABLE, ErrorCode.NO_NODE_FOUND, str(exc)) from exc


@router.post("/schedule", response_model=ScheduleDecision)
async def schedule_pod(payload: ScheduleRequest, dispatcher=Depends(get_dispatcher)):
    """Pick the best ready node for a pod and bind it."""
    try:
        return await dispatcher.schedule(payload.pod_name, payload.namespace)
    except EmptyNodeList as exc:
        raise _error(
            status.HTTP_503_SERVICE_UNAVAILABLE, ErrorCode.EMPTY_NODE_LIST, "no ready nodes"
        ) from exc
    except NoNodeFound as exc:
        raise _error(status.HTTP_503_SERVICE_UNAVAILABLE, ErrorCode.NO_NODE_FOUND, str(exc)) from exc
    except httpx.HTTPError as exc:
        logger.error("Binding pod %s failed: %s", payload.pod_name, exc)
        raise _error(status.HTTP_502_BAD_GATEWAY, ErrorCode.BINDING_FAILED, str(exc)) from exc
