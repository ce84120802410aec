"""Domain types — monitors, AI dashboard designs, dashboards, widgets and widget data.

Widget configs and widget data are tagged unions discriminated on ``type``.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

# ── Monitor Types ───────────────────────────────────────────────


class MonitorState(StrEnum):
    """Overall state reported by Datadog for a monitor."""

    OK = "OK"
    ALERT = "Alert"
    WARN = "Warn"
    NO_DATA = "No Data"
    UNKNOWN = "Unknown"


class Monitor(BaseModel):
    """Snapshot of a Datadog monitor, read fresh per investigation."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    type: str = ""
    query: str = ""
    message: str = ""
    tags: list[str] = Field(default_factory=list)
    overall_state: MonitorState = MonitorState.UNKNOWN
    created: str = ""
    modified: str = ""
    org_id: int | None = None
    priority: int | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("overall_state", mode="before")
    @classmethod
    def _coerce_state(cls, value: Any) -> Any:
        if value is None:
            return MonitorState.UNKNOWN
        try:
            return MonitorState(value)
        except ValueError:
            return MonitorState.UNKNOWN

    @field_validator("name", "type", "query", "message", "created", "modified", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


# ── AI Design Types ─────────────────────────────────────────────

TIME_RANGE_TOKENS: tuple[str, ...] = ("1h", "3h", "6h", "12h", "24h", "2d", "7d")
DEFAULT_TIME_RANGE = "1h"


class Thresholds(BaseModel):
    """Warning / critical thresholds for a single-value metric."""

    warning: float | None = None
    critical: float | None = None


class WidgetDesign(BaseModel):
    """One widget proposed by the LLM (or the fallback design).

    ``type`` is kept as a free string: LLM output may name types we do
    not render, and those are dropped later by the compositor.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    title: str = ""
    query: str | None = None
    visualization: str | None = None
    width: int | None = None
    height: int | None = None
    reasoning: str | None = None
    y_axis_label: str | None = Field(default=None, alias="yAxisLabel")
    aggregation: Literal["avg", "sum", "min", "max", "last"] | None = None
    thresholds: Thresholds | None = None
    limit: int | None = None
    content: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("aggregation", mode="before")
    @classmethod
    def _drop_unknown_aggregation(cls, value: Any) -> Any:
        if value in ("avg", "sum", "min", "max", "last"):
            return value
        return None

    @field_validator("width", "height", "limit", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> int | None:
        """Truncate numeric sizes; anything else leaves the default in place."""
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return None
        if isinstance(value, (int, float)) and math.isfinite(value):
            return int(value)
        return None


class DashboardDesign(BaseModel):
    """Abstract widget plan for an investigation dashboard."""

    investigation: str = ""
    widgets: list[WidgetDesign] = Field(default_factory=list)
    layout_strategy: str = ""
    time_range: str = DEFAULT_TIME_RANGE

    @field_validator("time_range", mode="before")
    @classmethod
    def _normalize_time_range(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip() in TIME_RANGE_TOKENS:
            return value.strip()
        return DEFAULT_TIME_RANGE

    @field_validator("investigation", "layout_strategy", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


# ── Dashboard Types ─────────────────────────────────────────────


class WidgetType(StrEnum):
    """Widget kinds the dashboard can render."""

    TIMESERIES = "timeseries"
    METRIC = "metric"
    LOGS = "logs"
    ALERT_STATUS = "alert_status"
    MARKDOWN = "markdown"


class DataSource(BaseModel):
    """Where a widget's data comes from."""

    type: Literal["datadog"] = "datadog"


class WidgetLayout(BaseModel):
    """Grid placement in a 12-column layout."""

    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    width: int = Field(default=4, ge=1, le=12)
    height: int = Field(default=2, ge=1)


class TimeRange(BaseModel):
    """Time window applied to every data-bearing widget of a dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(alias="from")
    to: datetime
    display: str = "Last 1 hour"

    @property
    def from_ms(self) -> int:
        return int(self.from_.timestamp() * 1000)

    @property
    def to_ms(self) -> int:
        return int(self.to.timestamp() * 1000)


# ── Widget Configs ──────────────────────────────────────────────


class TimeseriesConfig(BaseModel):
    type: Literal["timeseries"] = "timeseries"
    query: str
    data_source: DataSource = Field(default_factory=DataSource)
    y_axis_label: str | None = None
    show_legend: bool = True
    line_type: Literal["line", "area", "bar"] = "line"


class MetricConfig(BaseModel):
    type: Literal["metric"] = "metric"
    query: str
    data_source: DataSource = Field(default_factory=DataSource)
    aggregation: Literal["avg", "sum", "min", "max", "last"] = "avg"
    thresholds: Thresholds | None = None


class LogsConfig(BaseModel):
    type: Literal["logs"] = "logs"
    query: str
    data_source: DataSource = Field(default_factory=DataSource)
    limit: int = Field(default=50, ge=1, le=1000)
    show_timestamp: bool = True
    show_service: bool = True


class AlertStatusConfig(BaseModel):
    type: Literal["alert_status"] = "alert_status"
    monitor_id: int
    data_source: DataSource = Field(default_factory=DataSource)


class MarkdownConfig(BaseModel):
    type: Literal["markdown"] = "markdown"
    content: str = ""


WidgetConfig = Annotated[
    TimeseriesConfig | MetricConfig | LogsConfig | AlertStatusConfig | MarkdownConfig,
    Field(discriminator="type"),
]


# ── Widget Data ─────────────────────────────────────────────────


class DataPoint(BaseModel):
    timestamp: float  # epoch milliseconds
    value: float


class SeriesData(BaseModel):
    name: str
    color: str | None = None
    data: list[DataPoint] = Field(default_factory=list)


class TimeseriesData(BaseModel):
    type: Literal["timeseries"] = "timeseries"
    series: list[SeriesData] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None


class MetricTrend(StrEnum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MetricStatus(StrEnum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class MetricData(BaseModel):
    type: Literal["metric"] = "metric"
    value: float = 0.0
    unit: str | None = None
    trend: MetricTrend = MetricTrend.STABLE
    change_percent: float = 0.0
    status: MetricStatus = MetricStatus.OK
    loading: bool = False
    error: str | None = None


class LogLevel(StrEnum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class LogEntry(BaseModel):
    id: str
    timestamp: float  # epoch milliseconds
    level: LogLevel = LogLevel.INFO
    service: str | None = None
    message: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)


class LogsData(BaseModel):
    type: Literal["logs"] = "logs"
    entries: list[LogEntry] = Field(default_factory=list)
    total_count: int | None = None
    loading: bool = False
    error: str | None = None


class AlertStatus(StrEnum):
    OK = "ok"
    ALERT = "alert"
    WARN = "warn"
    NO_DATA = "no_data"


class AlertStatusData(BaseModel):
    type: Literal["alert_status"] = "alert_status"
    status: AlertStatus = AlertStatus.NO_DATA
    monitor_name: str = "Unknown"
    last_triggered: datetime | None = None
    message: str | None = None
    loading: bool = False
    error: str | None = None


class MarkdownData(BaseModel):
    type: Literal["markdown"] = "markdown"
    content: str = ""


WidgetData = Annotated[
    TimeseriesData | MetricData | LogsData | AlertStatusData | MarkdownData,
    Field(discriminator="type"),
]


# ── Dashboard ───────────────────────────────────────────────────


class Widget(BaseModel):
    """One panel of a dashboard; ``type``, config and data always agree."""

    id: str
    type: WidgetType
    title: str
    description: str | None = None
    layout: WidgetLayout
    data: WidgetData | None = None
    config: WidgetConfig

    @model_validator(mode="after")
    def _check_variants(self) -> Widget:
        if self.config.type != self.type.value:
            raise ValueError(
                f"widget {self.id}: config type {self.config.type!r} "
                f"does not match widget type {self.type.value!r}"
            )
        if self.data is not None and self.data.type != self.type.value:
            raise ValueError(
                f"widget {self.id}: data type {self.data.type!r} "
                f"does not match widget type {self.type.value!r}"
            )
        return self


class Dashboard(BaseModel):
    """An investigation dashboard — the unit stored and shared by the browser."""

    id: str
    title: str
    description: str | None = None
    created_at: datetime
    monitor_id: int | None = None
    widgets: list[Widget] = Field(default_factory=list)
    time_range: TimeRange

    @model_validator(mode="after")
    def _check_unique_ids(self) -> Dashboard:
        seen: set[str] = set()
        for widget in self.widgets:
            if widget.id in seen:
                raise ValueError(f"duplicate widget id {widget.id!r}")
            seen.add(widget.id)
        return self

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with ISO-8601 timestamps, as stored by the browser."""
        return self.model_dump(mode="json", by_alias=True)


class InvestigationResult(BaseModel):
    """Result of investigating a monitor."""

    investigation: str
    dashboard: Dashboard
