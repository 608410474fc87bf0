"""Metric source interface consumed by the ranking engine."""

from __future__ import annotations

from typing import Protocol


class MetricFetcher(Protocol):
    """Protocol implemented by sources capable of supplying a host metric on demand."""

    async def get_metric(self, host: str) -> float:
        """Return the latest sample for ``host`` or raise a ``SchedulerError``."""
        ...
