"""Tests for the layout compositor — grid placement, defaults, notes widget."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from src.core.types import (
    AlertStatusConfig,
    DashboardDesign,
    LogsConfig,
    MarkdownConfig,
    MetricConfig,
    Monitor,
    Thresholds,
    TimeseriesConfig,
    WidgetDesign,
    WidgetType,
)
from src.dashboard.designer import default_design
from src.dashboard.layout import (
    TIME_RANGE_DISPLAY,
    TIME_RANGE_MS,
    compose_dashboard,
    resolve_time_range,
    widget_from_design,
)

_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _make_monitor(**overrides: object) -> Monitor:
    data: dict[str, object] = {
        "id": 42,
        "name": "Checkout latency",
        "type": "metric alert",
        "query": "avg:latency{service:checkout}",
        "tags": ["service:checkout"],
        "overall_state": "Warn",
    }
    data.update(overrides)
    return Monitor.model_validate(data)


def _design(*widgets: WidgetDesign, **kwargs: object) -> DashboardDesign:
    return DashboardDesign(widgets=list(widgets), **kwargs)  # type: ignore[arg-type]


# ── Time range ──────────────────────────────────────────────────


class TestResolveTimeRange:
    @pytest.mark.parametrize("token", list(TIME_RANGE_MS))
    def test_known_tokens(self, token: str) -> None:
        tr = resolve_time_range(token, _NOW)
        assert tr.to == _NOW
        assert tr.to - tr.from_ == timedelta(milliseconds=TIME_RANGE_MS[token])
        assert tr.display == TIME_RANGE_DISPLAY[token]

    def test_two_days(self) -> None:
        tr = resolve_time_range("2d", _NOW)
        assert tr.from_ == _NOW - timedelta(days=2)
        assert tr.display == "Last 2 days"

    @pytest.mark.parametrize("token", [None, "", "5m", "1w"])
    def test_unknown_defaults_to_one_hour(self, token: str | None) -> None:
        tr = resolve_time_range(token, _NOW)
        assert tr.from_ == _NOW - timedelta(hours=1)
        assert tr.display == "Last 1 hour"


# ── Single widget ───────────────────────────────────────────────


class TestWidgetFromDesign:
    @pytest.mark.parametrize(
        ("widget_type", "size"),
        [("timeseries", (6, 3)), ("metric", (3, 2)), ("logs", (6, 4)), ("markdown", (6, 3))],
    )
    def test_default_sizes(self, widget_type: str, size: tuple[int, int]) -> None:
        widget = widget_from_design(WidgetDesign(type=widget_type), 0, 0)
        assert widget is not None
        assert (widget.layout.width, widget.layout.height) == size

    def test_width_clamped_to_remaining_columns(self) -> None:
        widget = widget_from_design(WidgetDesign(type="logs", width=8), 9, 0)
        assert widget is not None
        assert widget.layout.width == 3

    def test_non_positive_size_uses_default(self) -> None:
        widget = widget_from_design(WidgetDesign(type="metric", width=0, height=-1), 0, 0)
        assert widget is not None
        assert (widget.layout.width, widget.layout.height) == (3, 2)

    def test_odd_llm_sizes(self) -> None:
        design = WidgetDesign.model_validate({"type": "timeseries", "width": 4.5, "height": "big"})
        widget = widget_from_design(design, 0, 0)
        assert widget is not None
        assert (widget.layout.width, widget.layout.height) == (4, 3)

    def test_query_defaults(self) -> None:
        ts = widget_from_design(WidgetDesign(type="timeseries"), 0, 0)
        metric = widget_from_design(WidgetDesign(type="metric"), 0, 0)
        logs = widget_from_design(WidgetDesign(type="logs"), 0, 0)
        assert ts is not None and isinstance(ts.config, TimeseriesConfig)
        assert ts.config.query == "system.cpu.user{*}"
        assert metric is not None and isinstance(metric.config, MetricConfig)
        assert metric.config.query == "avg:system.cpu.user{*}"
        assert metric.config.aggregation == "avg"
        assert logs is not None and isinstance(logs.config, LogsConfig)
        assert logs.config.query == "status:error"
        assert logs.config.limit == 50

    @pytest.mark.parametrize(
        ("visualization", "line_type"),
        [("bar", "bar"), ("AREA", "area"), ("line", "line"), ("heatmap", "line"), (None, "line")],
    )
    def test_line_type_from_visualization(self, visualization: str | None, line_type: str) -> None:
        widget = widget_from_design(WidgetDesign(type="timeseries", visualization=visualization), 0, 0)
        assert widget is not None and isinstance(widget.config, TimeseriesConfig)
        assert widget.config.line_type == line_type

    def test_metric_carries_thresholds(self) -> None:
        design = WidgetDesign(type="metric", thresholds=Thresholds(warning=1, critical=5), aggregation="max")
        widget = widget_from_design(design, 0, 0)
        assert widget is not None and isinstance(widget.config, MetricConfig)
        assert widget.config.thresholds == Thresholds(warning=1, critical=5)
        assert widget.config.aggregation == "max"

    def test_markdown_falls_back_to_reasoning(self) -> None:
        widget = widget_from_design(WidgetDesign(type="markdown", reasoning="why"), 0, 0)
        assert widget is not None and isinstance(widget.config, MarkdownConfig)
        assert widget.config.content == "why"

    def test_default_titles(self) -> None:
        widget = widget_from_design(WidgetDesign(type="logs"), 0, 0)
        assert widget is not None
        assert widget.title == "Logs"

    @pytest.mark.parametrize("widget_type", ["heatmap", "alert_status", ""])
    def test_unbuilt_types_yield_nothing(self, widget_type: str) -> None:
        assert widget_from_design(WidgetDesign(type=widget_type), 0, 0) is None


# ── Whole dashboard ─────────────────────────────────────────────


class TestComposeDashboard:
    def test_status_widget_first(self) -> None:
        dashboard = compose_dashboard(_make_monitor(), _design(WidgetDesign(type="metric")), now=_NOW)
        first = dashboard.widgets[0]
        assert first.type == WidgetType.ALERT_STATUS
        assert (first.layout.x, first.layout.y, first.layout.width, first.layout.height) == (0, 0, 3, 2)
        assert isinstance(first.config, AlertStatusConfig)
        assert first.config.monitor_id == 42

    def test_cursor_flow_and_wrap(self) -> None:
        design = _design(
            WidgetDesign(type="timeseries"),  # x=3 w=6
            WidgetDesign(type="metric"),  # x=9 w=3 -> wraps
            WidgetDesign(type="logs"),  # x=0 y=2
            WidgetDesign(type="markdown", width=8),  # x=6 clamped to 6 -> wraps
            WidgetDesign(type="metric"),  # x=0 y=3
        )
        dashboard = compose_dashboard(_make_monitor(), design, now=_NOW)
        placed = [(w.layout.x, w.layout.y, w.layout.width) for w in dashboard.widgets[1:-1]]
        assert placed == [(3, 0, 6), (9, 0, 3), (0, 2, 6), (6, 2, 6), (0, 3, 3)]

    def test_no_widget_exceeds_grid(self) -> None:
        design = _design(*(WidgetDesign(type=t, width=w) for t, w in [
            ("timeseries", 12), ("metric", 7), ("logs", 5), ("markdown", 11), ("metric", 1),
        ]))
        dashboard = compose_dashboard(_make_monitor(), design, now=_NOW)
        assert all(w.layout.x + w.layout.width <= 12 for w in dashboard.widgets)

    def test_notes_widget_last_below_everything(self) -> None:
        design = _design(WidgetDesign(type="logs", height=4), WidgetDesign(type="timeseries", width=3))
        dashboard = compose_dashboard(_make_monitor(), design, now=_NOW)
        notes = dashboard.widgets[-1]
        others = dashboard.widgets[:-1]
        assert notes.type == WidgetType.MARKDOWN
        assert notes.title == "Investigation Guide"
        assert (notes.layout.x, notes.layout.width, notes.layout.height) == (0, 12, 3)
        assert notes.layout.y == max(max(w.layout.y + w.layout.height for w in others), 3)

    def test_notes_row_minimum_three(self) -> None:
        dashboard = compose_dashboard(_make_monitor(), _design(WidgetDesign(type="heatmap")), now=_NOW)
        assert len(dashboard.widgets) == 2
        assert dashboard.widgets[-1].layout.y == 3

    def test_unknown_types_dropped(self) -> None:
        design = _design(WidgetDesign(type="heatmap"), WidgetDesign(type="metric"))
        dashboard = compose_dashboard(_make_monitor(), design, now=_NOW)
        assert [w.type for w in dashboard.widgets] == [
            WidgetType.ALERT_STATUS,
            WidgetType.METRIC,
            WidgetType.MARKDOWN,
        ]
        # the dropped widget does not consume a slot
        assert dashboard.widgets[1].layout.x == 3

    def test_dashboard_metadata(self) -> None:
        design = _design(WidgetDesign(type="metric"), layout_strategy="Errors first", time_range="6h")
        dashboard = compose_dashboard(_make_monitor(), design, now=_NOW)
        assert dashboard.title == "AI Investigation: Checkout latency"
        assert dashboard.description == "Errors first"
        assert dashboard.monitor_id == 42
        assert dashboard.created_at == _NOW
        assert dashboard.time_range.display == "Last 6 hours"
        assert dashboard.time_range.from_ == _NOW - timedelta(hours=6)

    def test_default_description(self) -> None:
        dashboard = compose_dashboard(_make_monitor(), _design(WidgetDesign(type="metric")), now=_NOW)
        assert dashboard.description == "AI-designed dashboard for investigating monitor 42"

    def test_ids_unique_and_fresh(self) -> None:
        monitor = _make_monitor()
        design = default_design(monitor)
        a = compose_dashboard(monitor, design, now=_NOW)
        b = compose_dashboard(monitor, design, now=_NOW)
        assert a.id != b.id
        assert len({w.id for w in a.widgets}) == len(a.widgets)

    def test_fallback_design_layout(self) -> None:
        monitor = _make_monitor()
        dashboard = compose_dashboard(monitor, default_design(monitor), now=_NOW)
        # status + 5 fallback widgets + notes
        assert len(dashboard.widgets) == 7
        monitored = dashboard.widgets[1]
        assert (monitored.layout.x, monitored.layout.y, monitored.layout.width) == (3, 0, 9)
