"""Async Datadog REST client — monitors, metric queries, log search."""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from src.core.config import DatadogConfig, get_settings
from src.core.types import Monitor
from src.datadog.exceptions import DatadogApiError, DatadogConnectionError

logger = structlog.stdlib.get_logger()


class DatadogClient:
    """Thin async wrapper over the Datadog v1/v2 HTTP API.

    Credentials are validated on construction, before any request is made.

    Usage::

        async with DatadogClient(settings.datadog) as client:
            monitor = await client.get_monitor(12345)
            series = await client.query_metrics("avg:system.cpu.user{*}", t0, t1)
    """

    def __init__(self, config: DatadogConfig | None = None) -> None:
        cfg = config or get_settings().datadog
        self._api_key, self._app_key = cfg.require()
        self._config = cfg
        self._http: httpx.AsyncClient | None = None

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    async def connect(self) -> None:
        """Create the httpx async client."""
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers={
                "DD-API-KEY": self._api_key,
                "DD-APPLICATION-KEY": self._app_key,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(self._config.timeout_secs),
            verify=self._config.verify_ssl,
        )

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> DatadogClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Issue a request and return the decoded JSON body.

        Raises:
            DatadogApiError: on a non-2xx status or a transport failure.
        """
        if self._http is None:
            raise DatadogConnectionError("HTTP client not connected")

        try:
            response = await self._http.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DatadogApiError(
                exc.response.status_code,
                exc.response.reason_phrase,
                exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "datadog_request_failed",
                path=path,
                site=self._config.site,
                error=str(exc),
            )
            raise DatadogApiError(0, "Network Error", str(exc)) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DatadogApiError(
                response.status_code, "Invalid JSON", response.text[:200]
            ) from exc

    # ── Monitors ────────────────────────────────────────────────

    async def get_monitor_raw(self, monitor_id: int) -> dict[str, Any]:
        """Return the vendor-shaped monitor JSON."""
        return await self.request("GET", f"/api/v1/monitor/{monitor_id}")

    async def get_monitor(self, monitor_id: int) -> Monitor:
        """Fetch a monitor by id."""
        raw = await self.get_monitor_raw(monitor_id)
        try:
            return Monitor.model_validate(raw)
        except ValidationError as exc:
            raise DatadogApiError(502, "Unexpected monitor payload", str(exc)) from exc

    async def search_monitors(
        self,
        query: str,
        page: int = 0,
        per_page: int = 30,
    ) -> dict[str, Any]:
        """Search monitors using Datadog monitor search syntax."""
        return await self.request(
            "GET",
            "/api/v1/monitor/search",
            params={"query": query, "page": page, "per_page": per_page},
        )

    async def get_monitor_history(
        self,
        monitor_id: int,
        from_ts: int,
        to_ts: int,
    ) -> list[dict[str, Any]]:
        """State history for a monitor between two Unix-second bounds."""
        return await self.request(
            "GET",
            f"/api/v1/monitor/{monitor_id}/state_history",
            params={"from_ts": from_ts, "to_ts": to_ts},
        )

    # ── Metrics ─────────────────────────────────────────────────

    async def query_metrics(self, query: str, from_ts: int, to_ts: int) -> dict[str, Any]:
        """Query time series points between two Unix-second bounds.

        The response carries ``series``, each with a ``metric`` name and a
        ``pointlist`` of ``[timestamp_ms, value_or_null]`` pairs.
        """
        return await self.request(
            "GET",
            "/api/v1/query",
            params={"query": query, "from": from_ts, "to": to_ts},
        )

    # ── Logs ────────────────────────────────────────────────────

    async def search_logs(
        self,
        query: str,
        from_: str,
        to: str,
        limit: int = 50,
        sort: str = "-timestamp",
    ) -> dict[str, Any]:
        """Search log events. ``from_``/``to`` are passed through unchanged."""
        body = {
            "filter": {"query": query, "from": from_, "to": to},
            "sort": sort,
            "page": {"limit": limit},
        }
        return await self.request("POST", "/api/v2/logs/events/search", json=body)
