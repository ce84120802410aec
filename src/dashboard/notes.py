"""Investigation notes: a deterministic markdown guide appended to every dashboard."""

from __future__ import annotations

from urllib.parse import quote

from src.core.types import DashboardDesign, Monitor
from src.dashboard.designer import AI_UNAVAILABLE_PLACEHOLDER
from src.dashboard.service import extract_service

_ROOT_CAUSE_CHECKS = (
    "**Recent Changes:** Check for deployments, config updates, or infrastructure changes",
    "**Dependencies:** Verify health of upstream and downstream services",
    "**External Factors:** Consider third-party service issues, traffic spikes, or network problems",
    "**Correlation:** Look for patterns with other alerts or incidents",
)

_ACTION_ITEMS = (
    "Review all metrics above for anomalies",
    "Check error logs for specific failure messages",
    "Verify recent deployments or changes",
    "Check dependencies and external services",
)


def quick_links(service: str, console_url: str) -> list[tuple[str, str]]:
    """Vendor-console links for a service as (label, url) pairs."""
    base = console_url.rstrip("/")
    tag = quote(f"service:{service}", safe="")
    return [
        ("Service Logs", f"{base}/logs?query={tag}"),
        ("APM Dashboard", f"{base}/apm/services/{quote(service, safe='')}"),
        ("Infrastructure", f"{base}/infrastructure/map?filter={tag}"),
    ]


def _investigation_steps(monitor: Monitor, service: str | None) -> list[str]:
    sections: list[tuple[str, tuple[str, ...]]] = []
    if monitor.type == "metric alert":
        sections.append((
            "Analyze Metric Trends",
            (
                "Check the main metric chart above for spikes or anomalies",
                "Look for patterns in the time series data",
                "Compare current values to historical baselines",
            ),
        ))
    if service:
        sections.append((
            "Service Health Check",
            (
                "Review error rates and latency metrics",
                "Check request volume for traffic spikes",
                "Examine error logs for specific failure patterns",
            ),
        ))
        sections.append((
            "Infrastructure Investigation",
            (
                "Verify CPU, memory, and disk usage",
                "Check network connectivity and latency",
                "Review recent deployments or configuration changes",
            ),
        ))
    else:
        sections.append((
            "System Investigation",
            (
                "Check related system metrics",
                "Review application logs for errors",
                "Verify infrastructure health",
            ),
        ))
    sections.append(("Root Cause Analysis", _ROOT_CAUSE_CHECKS))

    lines = ["## Investigation Steps", ""]
    for number, (heading, items) in enumerate(sections, start=1):
        lines.append(f"### {number}. {heading}")
        lines.extend(f"- {item}" for item in items)
        lines.append("")
    return lines


def format_investigation_notes(
    monitor: Monitor,
    design: DashboardDesign,
    console_url: str,
) -> str:
    """Render the "Investigation Guide" markdown for a monitor and its design."""
    service = extract_service(monitor)
    lines = ["# Investigation Guide", ""]

    if design.investigation and design.investigation != AI_UNAVAILABLE_PLACEHOLDER:
        lines += ["## AI Analysis", design.investigation, ""]

    lines += [
        "## Monitor Overview",
        "",
        f"**Monitor:** {monitor.name}",
        f"**Status:** `{monitor.overall_state.value}`",
        f"**Type:** {monitor.type}",
    ]
    if service:
        lines.append(f"**Service:** {service}")
    lines += [f"**Query:** `{monitor.query}`", ""]

    if monitor.message:
        lines += [f"**Alert Message:** {monitor.message}", ""]

    lines += _investigation_steps(monitor, service)

    reasoned = [w for w in design.widgets if w.reasoning]
    if reasoned:
        lines += ["## Dashboard Widgets", ""]
        for widget in reasoned:
            lines += [f"**{widget.title}:** {widget.reasoning}", ""]

    lines += ["## Action Items", ""]
    lines.extend(f"- [ ] {item}" for item in _ACTION_ITEMS)
    if service:
        lines.append(f"- [ ] Consider scaling {service} if needed")
    lines += ["- [ ] Document findings and resolution steps", ""]

    if service:
        lines += ["## Quick Links", ""]
        lines.extend(f"- [{label}]({url})" for label, url in quick_links(service, console_url))
        lines.append("")

    return "\n".join(lines)
