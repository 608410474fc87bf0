"""Client utility for querying per-host metrics from the telemetry backend."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import httpx

from .errors import BackendError, NoDataFound

WINDOW_START = -60
WINDOW_END = 0
SAMPLING = 60
GROUP_BY = "host"


@dataclass(slots=True)
class TelemetryClient:
    """Fetches one scalar metric per host over the most recent minute."""

    base_url: str
    http_client: httpx.AsyncClient
    metrics: list[str] = field(default_factory=lambda: ["cpu.used.percent"])
    timeout: float = 10.0

    async def get_metric(self, host: str) -> float:
        """Return ``data[0].d[0]`` for ``host``.

        Raises ``BackendError`` on transport failure, non-200 status or an
        unparseable body, and ``NoDataFound`` when the body has no sample.
        """
        try:
            response = await self.http_client.post(
                f"{self.base_url.rstrip('/')}/api/data",
                json=self.build_query(host),
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise BackendError(f"metric data request failed: {exc}") from exc

        if response.status_code != 200:
            raise BackendError(
                f"metric data response: {response.status_code} {response.reason_phrase}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise BackendError(f"metric data response is not valid JSON: {exc}") from exc

        return self.extract_value(host, payload)

    def build_query(self, host: str) -> dict[str, Any]:
        return {
            "metrics": [
                {"id": metric, "aggregations": {"time": "avg", "group": "avg"}}
                for metric in self.metrics
            ],
            "dataSourceType": GROUP_BY,
            "start": WINDOW_START,
            "end": WINDOW_END,
            "sampling": SAMPLING,
            "filter": f"host.hostName = '{host}'",
        }

    @staticmethod
    def extract_value(host: str, payload: Any) -> float:
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise NoDataFound(host)
        samples = data[0].get("d") or []
        if not isinstance(samples, list) or not samples:
            raise NoDataFound(host)
        value = samples[0]
        # bool is an int subclass but never a valid sample
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise NoDataFound(host)
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            raise NoDataFound(host)
        return value
