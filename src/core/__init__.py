"""Core module — config, types, logging."""

from src.core.config import Settings, get_settings, load_settings, reset_settings
from src.core.exceptions import ConfigurationError, InvestigatorError
from src.core.logging import setup_logging
from src.core.types import (
    Dashboard,
    DashboardDesign,
    InvestigationResult,
    Monitor,
    MonitorState,
    TimeRange,
    Widget,
    WidgetDesign,
    WidgetType,
)

__all__ = [
    "ConfigurationError",
    "Dashboard",
    "DashboardDesign",
    "InvestigationResult",
    "InvestigatorError",
    "Monitor",
    "MonitorState",
    "Settings",
    "TimeRange",
    "Widget",
    "WidgetDesign",
    "WidgetType",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
