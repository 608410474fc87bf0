"""Exception types raised by the telemetry client and the ranking pipeline."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for scheduling failures."""


class BackendError(SchedulerError):
    """Telemetry call failed at the transport level or returned a non-200 status."""


class NoDataFound(SchedulerError):
    """Telemetry response parsed but carried no usable sample."""

    def __init__(self, host: str) -> None:
        super().__init__(f"no data found for host '{host}'")
        self.host = host


class EmptyNodeList(SchedulerError):
    """Ranking was requested for zero candidate nodes."""

    def __init__(self) -> None:
        super().__init__("node list is empty")


class NoNodeFound(SchedulerError):
    """No candidate produced a valid metric."""

    def __init__(self) -> None:
        super().__init__("no suitable node found")
