"""Widget data resolver: fetches Datadog data for one widget config and time window.

Every widget type resolves to its matching ``WidgetData`` variant. Vendor
failures never escape: timeseries, metric and logs widgets fall back to
sample data with ``error`` set; alert_status widgets report ``no_data``
without guessing a status.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

import structlog

from src.core.types import (
    AlertStatus,
    AlertStatusConfig,
    AlertStatusData,
    DataPoint,
    LogEntry,
    LogLevel,
    LogsConfig,
    LogsData,
    MarkdownConfig,
    MarkdownData,
    MetricConfig,
    MetricData,
    MetricStatus,
    MetricTrend,
    MonitorState,
    SeriesData,
    Thresholds,
    TimeRange,
    TimeseriesConfig,
    TimeseriesData,
    Widget,
    WidgetConfig,
    WidgetData,
)
from src.dashboard.samples import SampleDataGenerator
from src.datadog.client import DatadogClient
from src.datadog.exceptions import DatadogApiError, DatadogError

logger = structlog.stdlib.get_logger()

MONITOR_STATUS_ERROR = "Failed to fetch monitor status"

_STATE_TO_STATUS: dict[str, AlertStatus] = {
    MonitorState.OK: AlertStatus.OK,
    MonitorState.ALERT: AlertStatus.ALERT,
    MonitorState.WARN: AlertStatus.WARN,
    MonitorState.NO_DATA: AlertStatus.NO_DATA,
}

# Datadog log statuses follow syslog severities
_LOG_LEVELS: dict[str, LogLevel] = {
    "emerg": LogLevel.ERROR,
    "emergency": LogLevel.ERROR,
    "alert": LogLevel.ERROR,
    "crit": LogLevel.ERROR,
    "critical": LogLevel.ERROR,
    "fatal": LogLevel.ERROR,
    "err": LogLevel.ERROR,
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "notice": LogLevel.INFO,
    "info": LogLevel.INFO,
    "ok": LogLevel.INFO,
    "debug": LogLevel.DEBUG,
    "trace": LogLevel.DEBUG,
}

# Malformed vendor payloads surface as ValueError/TypeError during conversion
_FETCH_ERRORS = (DatadogError, ValueError, TypeError)


def map_monitor_state(state: str | None) -> AlertStatus:
    """Datadog overall_state to widget status; anything unrecognized is no_data."""
    return _STATE_TO_STATUS.get(state or "", AlertStatus.NO_DATA)


def normalize_log_level(status: Any) -> LogLevel:
    if not isinstance(status, str):
        return LogLevel.INFO
    return _LOG_LEVELS.get(status.strip().lower(), LogLevel.INFO)


def metric_status(value: float, thresholds: Thresholds | None) -> MetricStatus:
    """Status from configured thresholds; ok when none are set."""
    if thresholds is None:
        return MetricStatus.OK
    if thresholds.critical is not None and value >= thresholds.critical:
        return MetricStatus.CRITICAL
    if thresholds.warning is not None and value >= thresholds.warning:
        return MetricStatus.WARNING
    return MetricStatus.OK


def describe_error(exc: BaseException) -> str:
    """Short, user-facing description of a fetch failure."""
    if isinstance(exc, DatadogApiError):
        if exc.status:
            return f"Datadog API error: {exc.status} {exc.status_text}"
        return f"Datadog unreachable: {exc.status_text}"
    if isinstance(exc, DatadogError):
        return "Datadog client error"
    return "Unexpected response from Datadog"


def _point_value(raw: Any) -> float:
    return float(raw) if raw is not None else 0.0


def _series_from_response(body: Any, query: str) -> list[SeriesData]:
    """Convert a /api/v1/query body into SeriesData; null values read as 0."""
    if not isinstance(body, dict):
        return []

    series: list[SeriesData] = []
    for raw in body.get("series") or []:
        if not isinstance(raw, dict):
            continue
        points = [
            DataPoint(timestamp=float(point[0]), value=_point_value(point[1]))
            for point in raw.get("pointlist") or []
            if isinstance(point, (list, tuple)) and len(point) >= 2 and point[0] is not None
        ]
        series.append(SeriesData(name=raw.get("metric") or query, data=points))
    return series


def _parse_timestamp_ms(value: Any, default: float) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return default
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed.timestamp() * 1000
    return default


def _log_entry(raw: dict[str, Any], index: int, default_ts: float) -> LogEntry:
    attributes = raw.get("attributes")
    if not isinstance(attributes, dict):
        attributes = {}
    message = attributes.get("message") or json.dumps(attributes, default=str)
    return LogEntry(
        id=str(raw.get("id") or f"log-{index}"),
        timestamp=_parse_timestamp_ms(attributes.get("timestamp"), default_ts),
        level=normalize_log_level(attributes.get("status")),
        service=attributes.get("service"),
        message=str(message),
        attributes=attributes,
    )


class WidgetDataResolver:
    """Resolves widget configs to widget data against a connected DatadogClient.

    Usage::

        async with DatadogClient(settings.datadog) as client:
            data = await WidgetDataResolver(client).resolve(config, time_range)
    """

    def __init__(
        self,
        client: DatadogClient,
        samples: SampleDataGenerator | None = None,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._samples = samples or SampleDataGenerator()
        self._now = now_fn or (lambda: datetime.now(UTC))
        self._fetchers: dict[str, Callable[[Any, TimeRange], Awaitable[WidgetData]]] = {
            "timeseries": self._timeseries,
            "metric": self._metric,
            "logs": self._logs,
            "alert_status": self._alert_status,
            "markdown": self._markdown,
        }
        self._fallbacks: dict[str, Callable[[Any, TimeRange, str], WidgetData]] = {
            "timeseries": self._sample_timeseries,
            "metric": lambda config, time_range, error: self._samples.metric(error=error),
            "logs": self._sample_logs,
            "alert_status": lambda config, time_range, error: AlertStatusData(
                status=AlertStatus.NO_DATA,
                error=MONITOR_STATUS_ERROR,
            ),
            "markdown": lambda config, time_range, error: MarkdownData(content=config.content),
        }

    async def resolve(self, config: WidgetConfig, time_range: TimeRange) -> WidgetData:
        """Resolve one widget; vendor failures come back as data with ``error`` set."""
        fetch = self._fetchers.get(config.type)
        if fetch is None:
            raise TypeError(f"unsupported widget config type {config.type!r}")

        try:
            return await fetch(config, time_range)
        except _FETCH_ERRORS as exc:
            logger.warning(
                "widget_data_fetch_failed",
                widget_type=config.type,
                error=str(exc),
            )
            return self._fallbacks[config.type](config, time_range, describe_error(exc))

    async def resolve_all(
        self,
        widgets: Sequence[Widget],
        time_range: TimeRange,
    ) -> dict[str, WidgetData]:
        """Resolve every widget concurrently; results keyed by widget id."""
        results = await asyncio.gather(
            *(self.resolve(widget.config, time_range) for widget in widgets)
        )
        return {widget.id: data for widget, data in zip(widgets, results)}

    # ── Per-type fetchers ───────────────────────────────────────

    async def _timeseries(self, config: TimeseriesConfig, time_range: TimeRange) -> TimeseriesData:
        body = await self._client.query_metrics(
            config.query,
            time_range.from_ms // 1000,
            time_range.to_ms // 1000,
        )
        series = _series_from_response(body, config.query)
        if not any(s.data for s in series):
            logger.info("widget_data_empty", widget_type="timeseries", query=config.query)
            return self._sample_timeseries(config, time_range, None)
        return TimeseriesData(series=series)

    async def _metric(self, config: MetricConfig, time_range: TimeRange) -> MetricData:
        body = await self._client.query_metrics(
            config.query,
            time_range.from_ms // 1000,
            time_range.to_ms // 1000,
        )
        series = _series_from_response(body, config.query)
        points = series[0].data if series else []
        if not points:
            logger.info("widget_data_empty", widget_type="metric", query=config.query)
            return self._samples.metric()

        value = points[-1].value
        change = 0.0
        if len(points) > 1:
            previous = points[-2].value
            if previous != 0:
                change = (value - previous) / previous * 100

        if change > 0:
            trend = MetricTrend.UP
        elif change < 0:
            trend = MetricTrend.DOWN
        else:
            trend = MetricTrend.STABLE

        return MetricData(
            value=value,
            trend=trend,
            change_percent=change,
            status=metric_status(value, config.thresholds),
        )

    async def _logs(self, config: LogsConfig, time_range: TimeRange) -> LogsData:
        body = await self._client.search_logs(
            config.query,
            time_range.from_.isoformat(),
            time_range.to.isoformat(),
            limit=config.limit,
            sort="-timestamp",
        )
        raw_logs = body.get("data") if isinstance(body, dict) else None
        entries = [
            _log_entry(raw, i, time_range.to_ms)
            for i, raw in enumerate(raw_logs or [])
            if isinstance(raw, dict)
        ]
        if not entries:
            logger.info("widget_data_empty", widget_type="logs", query=config.query)
            return self._sample_logs(config, time_range, None)

        meta = body.get("meta")
        page = meta.get("page") if isinstance(meta, dict) else None
        total = page.get("total_count") if isinstance(page, dict) else None
        return LogsData(entries=entries, total_count=total)

    async def _alert_status(self, config: AlertStatusConfig, time_range: TimeRange) -> AlertStatusData:
        monitor = await self._client.get_monitor(config.monitor_id)
        status = map_monitor_state(monitor.overall_state)
        return AlertStatusData(
            status=status,
            monitor_name=monitor.name or "Unknown",
            message=monitor.message or None,
            last_triggered=None if monitor.overall_state == MonitorState.OK else self._now(),
        )

    async def _markdown(self, config: MarkdownConfig, time_range: TimeRange) -> MarkdownData:
        return MarkdownData(content=config.content)

    # ── Sample fallbacks ────────────────────────────────────────

    def _sample_timeseries(
        self,
        config: TimeseriesConfig | MetricConfig,
        time_range: TimeRange,
        error: str | None,
    ) -> TimeseriesData:
        series = self._samples.timeseries(config.query, time_range.from_ms, time_range.to_ms)
        return TimeseriesData(series=[series], error=error)

    def _sample_logs(self, config: LogsConfig, time_range: TimeRange, error: str | None) -> LogsData:
        entries = self._samples.logs(time_range.to_ms)
        return LogsData(entries=entries, total_count=len(entries), error=error)
