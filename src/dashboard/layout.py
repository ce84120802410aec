"""Layout compositor: turns a DashboardDesign into a concrete 12-column Dashboard."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from src.core.types import (
    DEFAULT_TIME_RANGE,
    AlertStatusConfig,
    Dashboard,
    DashboardDesign,
    LogsConfig,
    MarkdownConfig,
    MetricConfig,
    Monitor,
    TimeRange,
    TimeseriesConfig,
    Widget,
    WidgetConfig,
    WidgetDesign,
    WidgetLayout,
    WidgetType,
)
from src.dashboard.notes import format_investigation_notes

GRID_COLUMNS = 12

STATUS_WIDGET_WIDTH = 3
STATUS_WIDGET_HEIGHT = 2

NOTES_WIDGET_TITLE = "Investigation Guide"
NOTES_WIDGET_HEIGHT = 3
NOTES_MIN_ROW = 3

DEFAULT_CONSOLE_URL = "https://app.datadoghq.com"

_HOUR_MS = 60 * 60 * 1000

TIME_RANGE_MS: dict[str, int] = {
    "1h": _HOUR_MS,
    "3h": 3 * _HOUR_MS,
    "6h": 6 * _HOUR_MS,
    "12h": 12 * _HOUR_MS,
    "24h": 24 * _HOUR_MS,
    "2d": 48 * _HOUR_MS,
    "7d": 7 * 24 * _HOUR_MS,
}

TIME_RANGE_DISPLAY: dict[str, str] = {
    "1h": "Last 1 hour",
    "3h": "Last 3 hours",
    "6h": "Last 6 hours",
    "12h": "Last 12 hours",
    "24h": "Last 24 hours",
    "2d": "Last 2 days",
    "7d": "Last 7 days",
}

# (width, height) when the design leaves them out
_DEFAULT_SIZES: dict[str, tuple[int, int]] = {
    WidgetType.TIMESERIES: (6, 3),
    WidgetType.METRIC: (3, 2),
    WidgetType.LOGS: (6, 4),
    WidgetType.MARKDOWN: (6, 3),
}
_FALLBACK_SIZE = (4, 2)

_LINE_TYPES = {"area": "area", "bar": "bar"}


def resolve_time_range(token: str | None, now: datetime | None = None) -> TimeRange:
    """Window ending at ``now`` for a time-range token; unknown tokens mean 1h."""
    now = now or datetime.now(UTC)
    key = token if token in TIME_RANGE_MS else DEFAULT_TIME_RANGE
    return TimeRange(
        from_=now - timedelta(milliseconds=TIME_RANGE_MS[key]),
        to=now,
        display=TIME_RANGE_DISPLAY[key],
    )


def line_type_for(visualization: str | None) -> str:
    return _LINE_TYPES.get((visualization or "").lower(), "line")


def _timeseries(design: WidgetDesign) -> tuple[str, WidgetConfig]:
    return design.title or "Metric", TimeseriesConfig(
        query=design.query or "system.cpu.user{*}",
        line_type=line_type_for(design.visualization),
        y_axis_label=design.y_axis_label,
    )


def _metric(design: WidgetDesign) -> tuple[str, WidgetConfig]:
    return design.title or "Metric Value", MetricConfig(
        query=design.query or "avg:system.cpu.user{*}",
        aggregation=design.aggregation or "avg",
        thresholds=design.thresholds,
    )


def _logs(design: WidgetDesign) -> tuple[str, WidgetConfig]:
    limit = design.limit if design.limit and 0 < design.limit <= 1000 else 50
    return design.title or "Logs", LogsConfig(
        query=design.query or "status:error",
        limit=limit,
    )


def _markdown(design: WidgetDesign) -> tuple[str, WidgetConfig]:
    return design.title or "Notes", MarkdownConfig(
        content=design.content or design.reasoning or "",
    )


# alert_status is deliberately absent: the compositor adds exactly one itself
_CONFIG_BUILDERS: dict[str, Callable[[WidgetDesign], tuple[str, WidgetConfig]]] = {
    WidgetType.TIMESERIES: _timeseries,
    WidgetType.METRIC: _metric,
    WidgetType.LOGS: _logs,
    WidgetType.MARKDOWN: _markdown,
}


def widget_from_design(design: WidgetDesign, x: int, y: int) -> Widget | None:
    """Place one designed widget at (x, y); None for types we do not build."""
    builder = _CONFIG_BUILDERS.get(design.type)
    if builder is None:
        return None

    default_width, default_height = _DEFAULT_SIZES.get(design.type, _FALLBACK_SIZE)
    width = design.width if design.width and design.width > 0 else default_width
    height = design.height if design.height and design.height > 0 else default_height
    width = min(width, GRID_COLUMNS - x)

    title, config = builder(design)
    return Widget(
        id=str(uuid.uuid4()),
        type=WidgetType(design.type),
        title=title,
        description=design.reasoning,
        layout=WidgetLayout(x=x, y=y, width=width, height=height),
        config=config,
    )


def status_widget(monitor: Monitor) -> Widget:
    return Widget(
        id=str(uuid.uuid4()),
        type=WidgetType.ALERT_STATUS,
        title="Monitor Status",
        layout=WidgetLayout(x=0, y=0, width=STATUS_WIDGET_WIDTH, height=STATUS_WIDGET_HEIGHT),
        config=AlertStatusConfig(monitor_id=monitor.id),
    )


def compose_dashboard(
    monitor: Monitor,
    design: DashboardDesign,
    now: datetime | None = None,
    console_url: str = DEFAULT_CONSOLE_URL,
) -> Dashboard:
    """Build the Dashboard for a monitor from its design.

    Layout: status widget at (0, 0), designed widgets flowing left to right
    from x=3 and wrapping at 12 columns, then a full-width notes widget below
    everything else.
    """
    now = now or datetime.now(UTC)
    widgets = [status_widget(monitor)]

    x, y = STATUS_WIDGET_WIDTH, 0
    for widget_design in design.widgets:
        widget = widget_from_design(widget_design, x, y)
        if widget is None:
            continue
        widgets.append(widget)

        x += widget.layout.width
        if x >= GRID_COLUMNS:
            x = 0
            # rows 0-1 are shared with the status widget
            y = max(y + 1, STATUS_WIDGET_HEIGHT)

    max_y = max([w.layout.y + w.layout.height for w in widgets] + [NOTES_MIN_ROW])
    widgets.append(Widget(
        id=str(uuid.uuid4()),
        type=WidgetType.MARKDOWN,
        title=NOTES_WIDGET_TITLE,
        layout=WidgetLayout(x=0, y=max_y, width=GRID_COLUMNS, height=NOTES_WIDGET_HEIGHT),
        config=MarkdownConfig(content=format_investigation_notes(monitor, design, console_url)),
    ))

    return Dashboard(
        id=str(uuid.uuid4()),
        title=f"AI Investigation: {monitor.name}",
        description=design.layout_strategy
        or f"AI-designed dashboard for investigating monitor {monitor.id}",
        created_at=now,
        monitor_id=monitor.id,
        widgets=widgets,
        time_range=resolve_time_range(design.time_range, now),
    )
