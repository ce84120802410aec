"""Investigation orchestration: monitor id in, design + dashboard out."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from src.core.types import InvestigationResult
from src.dashboard.designer import DashboardDesigner
from src.dashboard.layout import DEFAULT_CONSOLE_URL, compose_dashboard
from src.datadog.client import DatadogClient

logger = structlog.stdlib.get_logger()

INVESTIGATION_IN_PROGRESS = "Investigation in progress..."


class Investigator:
    """Looks up a monitor, has it designed, and lays out the dashboard.

    Monitor lookup errors (``DatadogApiError``) propagate to the caller;
    LLM problems never do, the designer falls back instead.
    """

    def __init__(
        self,
        datadog: DatadogClient,
        designer: DashboardDesigner,
        console_url: str = DEFAULT_CONSOLE_URL,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self._datadog = datadog
        self._designer = designer
        self._console_url = console_url
        self._now = now_fn or (lambda: datetime.now(UTC))

    async def investigate(self, monitor_id: int) -> InvestigationResult:
        monitor = await self._datadog.get_monitor(monitor_id)
        logger.info(
            "investigation_started",
            monitor_id=monitor.id,
            monitor_name=monitor.name,
            state=monitor.overall_state.value,
        )

        design = await self._designer.design(monitor)
        dashboard = compose_dashboard(
            monitor,
            design,
            now=self._now(),
            console_url=self._console_url,
        )

        logger.info(
            "investigation_completed",
            monitor_id=monitor.id,
            dashboard_id=dashboard.id,
            widgets=len(dashboard.widgets),
        )
        return InvestigationResult(
            investigation=design.investigation or INVESTIGATION_IN_PROGRESS,
            dashboard=dashboard,
        )
