"""Dashboard design engine: asks the LLM for a widget plan, with a rule-based fallback.

LLM output is treated as untrusted text: parsing yields a
``DesignParseResult`` rather than raising, and any failure (transport,
status, unparseable or empty plan) produces the deterministic fallback
design built from the monitor alone.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from src.core.types import (
    DEFAULT_TIME_RANGE,
    DashboardDesign,
    Monitor,
    WidgetDesign,
)
from src.dashboard.service import extract_service
from src.llm.client import SRE_SYSTEM_PROMPT, LlamaClient

logger = structlog.stdlib.get_logger()

AI_UNAVAILABLE_PLACEHOLDER = "Using default dashboard template. AI analysis unavailable."

FALLBACK_LAYOUT_STRATEGY = (
    "Critical metrics at top for immediate assessment, followed by supporting "
    "data for detailed investigation"
)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
# deeply nested input exhausts the decoder's recursion limit
_DECODE_ERRORS = (ValueError, RecursionError)

_DESIGN_PROMPT_TEMPLATE = """\
You are an expert Site Reliability Engineer designing a dashboard to investigate a firing monitor.

Monitor Details:
- Name: {name}
- Type: {type}
- Status: {state}
- Query: {query}
- Message: {message}
- Tags: {tags}

Available Widget Types:
1. timeseries - Line/area/bar charts for metrics over time
2. metric - Single value displays with trend indicators
3. logs - Log stream viewer with filtering
4. alert_status - Monitor status display
5. markdown - Rich text for notes and documentation

For each widget, you can specify:
- Query patterns (for metrics, logs)
- Visualization preferences (line, area or bar for timeseries)
- Size and position (width: 1-12, height: 1-4)
- yAxisLabel (timeseries), aggregation: avg|sum|min|max|last (metric)
- Thresholds as {{"warning": number, "critical": number}} (metric)
- limit: maximum number of log lines (logs)
- content: markdown text (markdown)

Based on this monitor, design a dashboard that will help investigate the issue. Consider:
1. What metrics are most relevant to this alert?
2. What logs would help diagnose the problem?
3. What related systems should be monitored?
4. What's the best way to visualize each piece of data?

Respond with a JSON object containing:
{{
  "investigation": "Brief analysis of the issue and investigation approach",
  "widgets": [
    {{
      "type": "widget_type",
      "title": "Widget Title",
      "query": "datadog query string",
      "visualization": "specific viz type if applicable",
      "width": 4,
      "height": 2,
      "reasoning": "why this widget is important"
    }}
  ],
  "layout_strategy": "how widgets should be arranged",
  "time_range": "recommended time range, one of 1h, 3h, 6h, 12h, 24h, 2d, 7d"
}}"""


@dataclass(frozen=True)
class DesignParseResult:
    """Outcome of parsing LLM text: a design, or the reason there is none."""

    design: DashboardDesign | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.design is not None


def build_design_prompt(monitor: Monitor) -> str:
    """Render the design prompt for a monitor."""
    return _DESIGN_PROMPT_TEMPLATE.format(
        name=monitor.name,
        type=monitor.type,
        state=monitor.overall_state.value,
        query=monitor.query,
        message=monitor.message,
        tags=", ".join(monitor.tags),
    )


def _load_json_object(text: str) -> Any:
    """Parse ``text`` as JSON, falling back to the outermost ``{...}`` span."""
    try:
        return json.loads(text)
    except _DECODE_ERRORS:
        pass

    match = _JSON_OBJECT.search(text)
    if match is None:
        raise ValueError("no JSON object found in response")
    return json.loads(match.group(0))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else json.dumps(value)


def _design_from_payload(payload: Any) -> DesignParseResult:
    if not isinstance(payload, dict):
        return DesignParseResult(error=f"expected a JSON object, got {type(payload).__name__}")

    raw_widgets = payload.get("widgets")
    if not isinstance(raw_widgets, list):
        raw_widgets = []

    widgets: list[WidgetDesign] = []
    for raw in raw_widgets:
        if not isinstance(raw, dict):
            continue
        try:
            widgets.append(WidgetDesign.model_validate(raw))
        except ValidationError as exc:
            logger.debug("dashboard_design_widget_skipped", error=str(exc), widget=raw)

    if not widgets:
        return DesignParseResult(error="design contains no usable widgets")

    design = DashboardDesign(
        investigation=_as_text(payload.get("investigation")),
        widgets=widgets,
        layout_strategy=_as_text(payload.get("layout_strategy")),
        time_range=payload.get("time_range"),
    )
    return DesignParseResult(design=design)


def parse_design_response(text: str) -> DesignParseResult:
    """Parse LLM text into a DashboardDesign without raising."""
    try:
        payload = _load_json_object(text)
    except _DECODE_ERRORS as exc:
        return DesignParseResult(error=f"unparseable response: {exc}")
    return _design_from_payload(payload)


def default_design(monitor: Monitor) -> DashboardDesign:
    """Deterministic design derived from the monitor alone."""
    service = extract_service(monitor)

    widgets = [
        WidgetDesign(
            type="timeseries",
            title="Monitored Metric",
            query=monitor.query,
            width=9,
            height=3,
            reasoning=(
                "Primary metric that triggered the alert. Look for spikes, drops, "
                "or unusual patterns that correlate with the alert timing."
            ),
        ),
    ]

    if service:
        widgets.extend([
            WidgetDesign(
                type="metric",
                title="Current Error Rate",
                query=(
                    f"sum:trace.servlet.request{{service:{service},resource_name:*,"
                    f"http.status_class:5xx}}.as_rate()/sum:trace.servlet.request"
                    f"{{service:{service},resource_name:*}}.as_rate()*100"
                ),
                width=3,
                height=2,
                reasoning=(
                    "Error percentage indicates service health. High error rates "
                    "often correlate with performance alerts."
                ),
            ),
            WidgetDesign(
                type="metric",
                title="P99 Latency",
                query=f"p99:trace.servlet.request.duration{{service:{service}}}",
                width=3,
                height=2,
                reasoning=(
                    "Response time performance. Increased latency can indicate "
                    "resource constraints or downstream issues."
                ),
            ),
            WidgetDesign(
                type="timeseries",
                title="Request Rate",
                query=f"sum:trace.servlet.request{{service:{service}}}.as_rate()",
                visualization="bar",
                width=6,
                height=3,
                reasoning=(
                    "Traffic volume trends. Sudden spikes can cause resource "
                    "exhaustion, while drops may indicate upstream failures."
                ),
            ),
            WidgetDesign(
                type="logs",
                title=f"Error Logs - {service}",
                query=f"service:{service} status:error",
                width=6,
                height=4,
                reasoning=(
                    "Recent error messages provide specific details about failures. "
                    "Look for patterns, stack traces, and error frequencies."
                ),
            ),
        ])
    else:
        widgets.extend([
            WidgetDesign(
                type="timeseries",
                title="System Metrics",
                query="avg:system.cpu.user{*}",
                width=6,
                height=3,
                reasoning=(
                    "General system performance indicators. Useful when specific "
                    "service metrics are not available."
                ),
            ),
            WidgetDesign(
                type="logs",
                title="Error Logs",
                query="status:error",
                width=6,
                height=4,
                reasoning=(
                    "System-wide error logs. Look for patterns and timestamps that "
                    "correlate with the alert."
                ),
            ),
        ])

    return DashboardDesign(
        investigation=(
            f"This dashboard was generated to investigate **{monitor.name}** which is "
            f"currently in **{monitor.overall_state.value}** state. The investigation "
            "focuses on the key metrics and logs that can help identify the root "
            "cause of this alert."
        ),
        widgets=widgets,
        layout_strategy=FALLBACK_LAYOUT_STRATEGY,
        time_range=DEFAULT_TIME_RANGE,
    )


class DashboardDesigner:
    """Produces a DashboardDesign for a monitor; never raises.

    Usage::

        async with LlamaClient(settings.llm) as llm:
            design = await DashboardDesigner(llm).design(monitor)
    """

    def __init__(self, llm: LlamaClient | None) -> None:
        self._llm = llm

    async def design(self, monitor: Monitor) -> DashboardDesign:
        """Ask the LLM for a design, falling back to ``default_design``."""
        if self._llm is None:
            return self._fallback(monitor, reason="llm_not_configured")

        try:
            completion = await self._llm.complete(
                build_design_prompt(monitor),
                system_prompt=SRE_SYSTEM_PROMPT,
            )
        except Exception as exc:
            logger.warning(
                "dashboard_design_llm_failed",
                monitor_id=monitor.id,
                error=str(exc),
            )
            return self._fallback(monitor, reason="llm_error")

        result = parse_design_response(completion.text or "{}")
        if result.design is None:
            logger.warning(
                "dashboard_design_parse_failed",
                monitor_id=monitor.id,
                error=result.error,
            )
            return self._fallback(monitor, reason="parse_error")

        logger.info(
            "dashboard_design_ready",
            monitor_id=monitor.id,
            source="llm",
            widgets=len(result.design.widgets),
            time_range=result.design.time_range,
        )
        return result.design

    @staticmethod
    def _fallback(monitor: Monitor, reason: str) -> DashboardDesign:
        design = default_design(monitor)
        logger.info(
            "dashboard_design_ready",
            monitor_id=monitor.id,
            source="fallback",
            reason=reason,
            widgets=len(design.widgets),
        )
        return design
