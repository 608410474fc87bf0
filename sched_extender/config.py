"""Configuration dataclass for the scheduler extender."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(slots=True)
class SchedulerConfig:
    """Runtime configuration for an extender instance."""

    telemetry_url: str = "https://app.sysdigcloud.com"
    telemetry_metric: str = "cpu.used.percent"
    telemetry_timeout: float = 10.0
    lower_is_better: bool = True
    kube_api_url: str = "http://localhost:8001"
    kube_timeout: float = 10.0
    scheduler_name: str = "metric-scheduler"
    watch_pending_pods: bool = False
    poll_interval: float = 5.0
    max_concurrency: int = 16
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "SchedulerConfig":
        return cls(
            telemetry_url=os.getenv("TELEMETRY_URL", "https://app.sysdigcloud.com"),
            telemetry_metric=os.getenv("TELEMETRY_METRIC", "cpu.used.percent"),
            telemetry_timeout=float(os.getenv("TELEMETRY_TIMEOUT", "10")),
            lower_is_better=_truthy(os.getenv("METRIC_LOWER_IS_BETTER", "true")),
            kube_api_url=os.getenv("KUBE_API_URL", "http://localhost:8001"),
            kube_timeout=float(os.getenv("KUBE_TIMEOUT", "10")),
            scheduler_name=os.getenv("SCHEDULER_NAME", "metric-scheduler"),
            watch_pending_pods=_truthy(os.getenv("WATCH_PENDING_PODS")),
            poll_interval=float(os.getenv("POLL_INTERVAL", "5")),
            max_concurrency=max(1, int(os.getenv("MAX_CONCURRENCY", "16"))),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
