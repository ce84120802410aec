"""Tests for src/core/types.py — monitor coercion, design normalization, widget unions."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.core.types import (
    AlertStatusConfig,
    Dashboard,
    DashboardDesign,
    LogsConfig,
    MarkdownConfig,
    MetricData,
    Monitor,
    MonitorState,
    TimeRange,
    TimeseriesConfig,
    TimeseriesData,
    Widget,
    WidgetDesign,
    WidgetLayout,
    WidgetType,
)

_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _make_widget(
    widget_id: str = "w1",
    widget_type: WidgetType = WidgetType.TIMESERIES,
    config: object | None = None,
    data: object | None = None,
) -> Widget:
    return Widget(
        id=widget_id,
        type=widget_type,
        title="Widget",
        layout=WidgetLayout(x=0, y=0, width=6, height=3),
        config=config or TimeseriesConfig(query="avg:cpu{*}"),  # type: ignore[arg-type]
        data=data,  # type: ignore[arg-type]
    )


def _time_range() -> TimeRange:
    return TimeRange(from_=datetime(2024, 5, 1, 11, 0, tzinfo=UTC), to=_NOW)


# ── Monitor ─────────────────────────────────────────────────────


class TestMonitor:
    def test_parses_vendor_payload(self) -> None:
        m = Monitor.model_validate({
            "id": 20829685,
            "name": "High latency",
            "type": "metric alert",
            "query": "avg(last_5m):avg:latency{service:api} > 1",
            "tags": ["service:api"],
            "overall_state": "Alert",
            "extra_field": "ignored",
        })
        assert m.id == 20829685
        assert m.overall_state == MonitorState.ALERT
        assert m.tags == ["service:api"]

    def test_unknown_state_coerced(self) -> None:
        m = Monitor.model_validate({"id": 1, "overall_state": "Ignored"})
        assert m.overall_state == MonitorState.UNKNOWN

    def test_null_fields_coerced(self) -> None:
        m = Monitor.model_validate({"id": 1, "message": None, "tags": None, "overall_state": None})
        assert m.message == ""
        assert m.tags == []
        assert m.overall_state == MonitorState.UNKNOWN

    def test_no_data_state(self) -> None:
        m = Monitor.model_validate({"id": 1, "overall_state": "No Data"})
        assert m.overall_state == MonitorState.NO_DATA

    def test_frozen(self) -> None:
        m = Monitor(id=1)
        with pytest.raises(ValidationError):
            m.name = "changed"  # type: ignore[misc]


# ── Designs ─────────────────────────────────────────────────────


class TestDashboardDesign:
    @pytest.mark.parametrize("token", ["1h", "3h", "6h", "12h", "24h", "2d", "7d"])
    def test_valid_tokens_kept(self, token: str) -> None:
        assert DashboardDesign(time_range=token).time_range == token

    @pytest.mark.parametrize("token", ["90m", "", None, 5, "1 hour"])
    def test_invalid_tokens_default_to_1h(self, token: object) -> None:
        assert DashboardDesign(time_range=token).time_range == "1h"  # type: ignore[arg-type]

    def test_widget_design_accepts_camel_case_label(self) -> None:
        w = WidgetDesign.model_validate({"type": "timeseries", "yAxisLabel": "ms"})
        assert w.y_axis_label == "ms"

    def test_unknown_aggregation_dropped(self) -> None:
        w = WidgetDesign.model_validate({"type": "metric", "aggregation": "median"})
        assert w.aggregation is None

    def test_null_title_becomes_empty(self) -> None:
        w = WidgetDesign.model_validate({"type": "logs", "title": None})
        assert w.title == ""


# ── Widgets ─────────────────────────────────────────────────────


class TestWidget:
    def test_config_union_discriminated(self) -> None:
        w = Widget.model_validate({
            "id": "a",
            "type": "logs",
            "title": "Logs",
            "layout": {"x": 0, "y": 0, "width": 6, "height": 4},
            "config": {"type": "logs", "query": "status:error"},
        })
        assert isinstance(w.config, LogsConfig)
        assert w.config.limit == 50

    def test_mismatched_config_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_widget(widget_type=WidgetType.METRIC, config=TimeseriesConfig(query="q"))

    def test_mismatched_data_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_widget(data=MetricData(value=1.0))

    def test_matching_data_accepted(self) -> None:
        w = _make_widget(data=TimeseriesData())
        assert isinstance(w.data, TimeseriesData)

    def test_layout_width_bounded(self) -> None:
        with pytest.raises(ValidationError):
            WidgetLayout(x=0, y=0, width=13, height=1)

    def test_logs_limit_bounded(self) -> None:
        with pytest.raises(ValidationError):
            LogsConfig(query="q", limit=0)


# ── Dashboard ───────────────────────────────────────────────────


class TestDashboard:
    def test_duplicate_widget_ids_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Dashboard(
                id="d",
                title="t",
                created_at=_NOW,
                widgets=[_make_widget("same"), _make_widget("same")],
                time_range=_time_range(),
            )

    def test_json_round_trip_rehydrates_timestamps(self) -> None:
        dashboard = Dashboard(
            id="d",
            title="t",
            created_at=_NOW,
            monitor_id=7,
            widgets=[
                _make_widget(
                    "status",
                    WidgetType.ALERT_STATUS,
                    AlertStatusConfig(monitor_id=7),
                ),
                _make_widget("notes", WidgetType.MARKDOWN, MarkdownConfig(content="# hi")),
            ],
            time_range=_time_range(),
        )
        blob = dashboard.to_json_dict()

        assert blob["created_at"].startswith("2024-05-01T12:00:00")
        assert "from" in blob["time_range"]
        assert "from_" not in blob["time_range"]

        restored = Dashboard.model_validate(blob)
        assert restored == dashboard
        assert restored.time_range.from_ == datetime(2024, 5, 1, 11, 0, tzinfo=UTC)

    def test_time_range_millis(self) -> None:
        tr = _time_range()
        assert tr.to_ms - tr.from_ms == 3_600_000
